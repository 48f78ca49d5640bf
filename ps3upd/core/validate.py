"""Title identifier checks (e.g. ``BLUS30181``)."""
from __future__ import annotations
import logging
import re
from typing import AbstractSet

from .config import KNOWN_PREFIXES
from .errors import FormatError, UnsupportedIdentifierError

logger = logging.getLogger(__name__)

TITLE_ID_LEN = 9
_PREFIX_RE = re.compile(r"[A-Z]{4}")
_SUFFIX_RE = re.compile(r"[0-9]{5}")

def validate_title_id(raw: str, known_prefixes: AbstractSet[str] = KNOWN_PREFIXES) -> str:
    """
    Check *raw* against the AAAA00000 shape and the prefix allow-list.

    Returns the identifier with its prefix uppercased; raises FormatError or
    UnsupportedIdentifierError otherwise.
    """
    if raw is None or len(raw) != TITLE_ID_LEN:
        raise FormatError(
            f"Title ID must be exactly {TITLE_ID_LEN} characters (got {len(raw or '')})."
        )
    prefix, suffix = raw[:4].upper(), raw[4:]
    if not _PREFIX_RE.fullmatch(prefix) or not _SUFFIX_RE.fullmatch(suffix):
        raise FormatError(f"Title ID '{raw}' must be 4 letters followed by 5 digits.")
    if prefix not in known_prefixes:
        raise UnsupportedIdentifierError(prefix)

    title_id = prefix + suffix
    logger.info("Title ID %s is valid", title_id)
    return title_id
