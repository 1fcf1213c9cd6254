import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Union


class LoanDataError(ValueError):
    pass


@dataclass(frozen=True)
class Contact:
    phone: str
    email: str
    address: str


@dataclass(frozen=True)
class Borrower:
    name: str
    contact: Contact


@dataclass(frozen=True)
class LoanRecord:
    contract_name: str
    borrower: Borrower
    loan_amount: int
    loan_type: str
    desired_timeline: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LoanRecord":
        """Build a record from the nested loan JSON shape.

        Expected layout::

            {"contractName": ...,
             "borrower": {"name": ..., "contact": {"phone", "email", "address"}},
             "loanDetails": {"loanAmount", "loanType", "desiredTimeline"}}
        """
        try:
            borrower = data["borrower"]
            contact = borrower["contact"]
            details = data["loanDetails"]
            amount = details["loanAmount"]
            if isinstance(amount, bool) or not isinstance(amount, int):
                raise LoanDataError(f"loanAmount must be an integer, got {amount!r}")
            return cls(
                contract_name=str(data["contractName"]),
                borrower=Borrower(
                    name=str(borrower["name"]),
                    contact=Contact(
                        phone=str(contact["phone"]),
                        email=str(contact["email"]),
                        address=str(contact["address"]),
                    ),
                ),
                loan_amount=amount,
                loan_type=str(details["loanType"]),
                desired_timeline=str(details["desiredTimeline"]),
            )
        except (KeyError, TypeError) as e:
            raise LoanDataError(f"Invalid loan data: missing or malformed {e}") from e

    def borrower_json(self) -> str:
        c = self.borrower.contact
        return json.dumps(
            {"name": self.borrower.name,
             "contact": {"phone": c.phone, "email": c.email, "address": c.address}},
            separators=(",", ":"),
        )


DEFAULT_LOAN = LoanRecord(
    contract_name="MortgageLoan",
    borrower=Borrower(
        name="YJ",
        contact=Contact(
            phone="+1-555-123-4567",
            email="manny@example.com",
            address="123 Elm Street, Springfield, IL, 62704",
        ),
    ),
    loan_amount=200000,
    loan_type="Home Loan",
    desired_timeline="2025-06-30",
)


def load_loan_record(path: Optional[Union[str, Path]] = None) -> LoanRecord:
    if not path:
        return DEFAULT_LOAN
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise LoanDataError(f"{path} is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise LoanDataError(f"{path} must contain a JSON object")
    return LoanRecord.from_dict(data)
