from __future__ import annotations
import re, urllib.parse
from typing import Optional

MIB = 1024 * 1024

def bytes_to_mb(n: Optional[int]) -> str:
    if n is None: return "?"
    return f"{n / MIB:.2f} MB"

def url_leaf_name(u: str) -> str:
    """Last '/' segment of the URL path (query and fragment dropped), percent-decoded."""
    path = urllib.parse.urlsplit(u or "").path
    return urllib.parse.unquote(path.split("/")[-1])

def safe_filename(name: str) -> str:
    return re.sub(r'[\\/*?:"<>|]+', "_", (name or "")).strip() or "file"
