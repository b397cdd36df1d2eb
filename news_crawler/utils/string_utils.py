import re


HTML_TAG_PATTERN = re.compile(r'<[a-z][\s\S]*>', re.IGNORECASE)


def guess_content_format(content: str) -> str:
    if HTML_TAG_PATTERN.search(content):
        return "html"
    if "\n" in content:
        return "markdown"
    return "text"


def strip_code_fences(text: str) -> str:
    """Remove a surrounding ```json ... ``` wrapper if the model added one."""
    cleaned = text.strip()
    if cleaned.startswith("```json"):
        cleaned = cleaned[7:]
    elif cleaned.startswith("```"):
        cleaned = cleaned[3:]
    if cleaned.endswith("```"):
        cleaned = cleaned[:-3]
    return cleaned.strip()
