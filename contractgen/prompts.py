from contractgen.loan import LoanRecord

SYSTEM = "You are a highly skilled Solidity developer. Output ONLY Solidity code. No explanations, no markdown fences."


def build_preview_prompt(loan: LoanRecord) -> str:
    return f"""
Generate a Solidity smart contract named "{loan.contract_name}" with:
- Borrower details: {loan.borrower_json()}
- Loan amount: {loan.loan_amount}
- Loan type: {loan.loan_type}
- Timeline: {loan.desired_timeline}
Include:
- Borrower physicalAddress (mention address as physicalAddress) storage
- Loan amount and type storage
- Timeline validation
- Loan status management (Pending, Approved, Rejected, Repaid)
- Admin controls
- SPDX-License-Identifier: MIT
- pragma solidity ^0.8.0 (MUST HAVE)
"""


def build_deploy_prompt(loan: LoanRecord, contract_name: str) -> str:
    return f"""
You are a highly skilled Solidity dev.
Generate a complete Solidity contract named "{contract_name}" for a loan with:
- Borrower details: {loan.borrower_json()}
- Loan amount: {loan.loan_amount}
- Loan type: {loan.loan_type}
- Desired timeline: {loan.desired_timeline}

Requirements:
1) pragma solidity ^0.8.0
2) Include admin, statuses (Pending, Approved, Rejected, Repaid)
3) Provide only valid Solidity code, NO extra text, nothing else.
4) No lines before or after the code. Just the Solidity.
5) Do not use 'address' for physicalAddress. Use 'physicalAddress' in struct, etc.
6) SPDX-License-Identifier: MIT
"""
