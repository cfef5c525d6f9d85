"""Artifact handles - generated bytes travel through the graph as data URLs."""

import base64
import binascii
from typing import Optional, Tuple


def to_data_url(data: bytes, mime_type: str) -> str:
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"


def from_data_url(url: Optional[str]) -> Optional[Tuple[bytes, str]]:
    """Decode a data URL into (bytes, mime_type); None if it is not one."""
    if not url or not url.startswith("data:") or ";base64," not in url:
        return None
    header, _, payload = url.partition(";base64,")
    try:
        return base64.b64decode(payload, validate=True), header[len("data:"):]
    except (binascii.Error, ValueError):
        return None
