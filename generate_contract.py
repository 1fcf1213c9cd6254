import os, sys

from dotenv import load_dotenv

from contractgen.completion import generate_code, make_client
from contractgen.fences import strip_markdown_fences
from contractgen.loan import load_loan_record
from contractgen.prompts import SYSTEM, build_preview_prompt


def main(out_path: str, model: str, client=None):
    loan = load_loan_record(os.getenv("LOAN_DATA_PATH"))
    prompt = build_preview_prompt(loan)
    if client is None:
        client = make_client(os.environ["OPENAI_API_KEY"], float(os.getenv("OPENAI_TIMEOUT", "120")))
    content = generate_code(client, prompt, model, temperature=0.0, system=SYSTEM)
    content = strip_markdown_fences(content)
    with open(out_path, "w", encoding="utf-8") as f:
        f.write(content + "\n")
    print(f"Wrote {out_path}")


if __name__ == "__main__":
    # usage: python generate_contract.py contracts/MortgageLoan.sol gpt-4
    load_dotenv()
    if len(sys.argv) < 2:
        raise SystemExit("usage: python generate_contract.py <out_path> [model]")
    out = sys.argv[1]
    model = sys.argv[2] if len(sys.argv) > 2 else os.getenv("OPENAI_MODEL", "gpt-4")
    main(out, model)
