"""
Meme image URL construction.

memegen.link renders a meme straight from its URL: every caption line is one
path segment, escaped with the service's own rules. Nothing here touches the
network.
"""

from typing import Optional, Sequence
from urllib.parse import urlencode

DEFAULT_API_BASE = "https://api.memegen.link"

# Applied in order; "_" must be doubled before spaces turn into "_".
_ESCAPES: tuple[tuple[str, str], ...] = (
    ("_", "__"),
    (" ", "_"),
    ("?", "~q"),
    ("%", "~p"),
    ("#", "~h"),
    ("/", "~s"),
    ("\\", "~b"),
    ("<", "~l"),
    (">", "~g"),
    ('"', "''"),
    ("\n", "~n"),
)

# memegen's placeholder for a line with no text
BLANK_SEGMENT = "_"


def encode_text_segment(text: str) -> str:
    """Escape one caption line into a memegen path segment."""
    if not text or not text.strip():
        return BLANK_SEGMENT

    for raw, escaped in _ESCAPES:
        text = text.replace(raw, escaped)
    return text


def build_meme_url(
    template_id: str,
    texts: Sequence[str],
    style: Optional[str] = None,
    font: Optional[str] = None,
    extension: str = "png",
    base_url: str = DEFAULT_API_BASE,
) -> str:
    """
    Build the image URL for a template and its caption lines.

    Args:
        template_id: memegen template id, used as-is in the path
        texts: caption lines, one path segment each
        style: optional style variant (query parameter)
        font: optional font name (query parameter)
        extension: image format suffix
        base_url: API root

    Returns:
        The absolute image URL
    """
    url = f"{base_url.rstrip('/')}/images/{template_id}"

    segments = [encode_text_segment(text) for text in texts]
    if segments:
        url += "/" + "/".join(segments)

    url += f".{extension}"

    params = []
    if style:
        params.append(("style", style))
    if font:
        params.append(("font", font))
    if params:
        url += "?" + urlencode(params)

    return url
