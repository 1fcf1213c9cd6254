import re

FENCE_OPENER = re.compile(r"```(\w+)?")


def strip_markdown_fences(text: str) -> str:
    """Remove ```lang / ``` markers and surrounding whitespace."""
    # removing a marker can join backticks on either side into a new one
    while "```" in text:
        text = FENCE_OPENER.sub("", text).replace("```", "")
    return text.strip()
