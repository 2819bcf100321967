"""URL-safe username generation utilities."""

import re
import unicodedata


def slugify(text: str) -> str:
    """Convert a display name to a URL-safe slug (lowercase, hyphens, no special chars).

    Args:
        text: Name to slugify (e.g. "Alex Kumar").

    Returns:
        Slugified text (e.g. "alex-kumar").
    """
    text = unicodedata.normalize("NFKD", text).encode("ascii", "ignore").decode("ascii")
    text = text.lower().strip()
    text = re.sub(r"[^\w\s-]", "", text)
    text = re.sub(r"[\s_]+", "-", text)
    text = re.sub(r"-+", "-", text)
    return text.strip("-")


def suffixed(base: str, counter: int) -> str:
    """Collision variant of a username: `base-1`, `base-2`, ..."""
    return f"{base}-{counter}"
