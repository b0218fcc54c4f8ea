"""Data URL helpers: uploaded bytes → preview data URL → (base64, mime) for the API."""
import base64
import re

ALLOWED_IMAGE_TYPES = ["png", "jpg", "jpeg"]
DEFAULT_OCR_MIME = "image/jpeg"

_MIME_RE = re.compile(r":(.*?);")


def to_data_url(data: bytes, mime_type: str | None) -> str:
    """Encode raw image bytes as data:<mime>;base64,<payload>."""
    mime = mime_type or "image/png"
    b64 = base64.b64encode(data).decode("utf-8")
    return f"data:{mime};base64,{b64}"


def split_data_url(data_url: str | None) -> tuple[str | None, str | None]:
    """
    Split a data URL into (base64 payload, mime type).

    Only a URL with exactly one comma yields a payload. The mime type is whatever sits
    between the first ':' and the next ';' of the header, or None if there is no match.
    """
    if not data_url:
        return None, None
    parts = data_url.split(",")
    if len(parts) != 2:
        return None, None
    header, payload = parts
    m = _MIME_RE.search(header)
    return payload, (m.group(1) if m else None)


def mime_from_filename(name: str | None) -> str | None:
    """Fallback mime type from an uploaded file's extension."""
    ext = (name or "").rsplit(".", 1)[-1].lower() if "." in (name or "") else ""
    if ext in ("jpg", "jpeg"):
        return "image/jpeg"
    if ext == "png":
        return "image/png"
    return None
