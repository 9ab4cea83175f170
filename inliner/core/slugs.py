import re

_INVALID_RUN = re.compile(r"[^a-z0-9-]+")
_DASH_RUN = re.compile(r"-+")


def slugify(text: str) -> str:
    """Lowercase `text` and reduce it to `[a-z0-9-]`, collapsing and trimming dashes.

    Returns an empty string when `text` holds no ASCII letters or digits.
    """
    text = text.lower()
    text = _INVALID_RUN.sub("-", text)
    text = _DASH_RUN.sub("-", text)
    return text.strip("-")
