"""
ps3upd/core/errors.py – Exception hierarchy for the update downloader.

Everything raised by the core derives from UpdateToolError so the CLI can
catch broadly, while tests and callers can target the specific kind.
"""
from __future__ import annotations

from pathlib import Path
from typing import Optional


class UpdateToolError(Exception):
    """Base class for all ps3upd errors."""


# ── Identifier ───────────────────────────────────────────────────────────────
class ValidationError(UpdateToolError):
    """Raised when a title identifier is rejected."""


class FormatError(ValidationError):
    """The identifier does not have the AAAA00000 shape."""


class UnsupportedIdentifierError(ValidationError):
    """The identifier is well-formed but its prefix is not a known region code."""

    def __init__(self, prefix: str) -> None:
        self.prefix = prefix
        super().__init__(f"Unsupported title prefix '{prefix}'.")


# ── Manifest ─────────────────────────────────────────────────────────────────
class FetchError(UpdateToolError):
    """
    The manifest could not be retrieved.

    The CDN answers unknown titles and outages in much the same way, so both
    land here; only the message tells them apart.
    """

    def __init__(self, title_id: str, message: str) -> None:
        self.title_id = title_id
        super().__init__(message)


class ParseError(UpdateToolError):
    """The manifest is not well-formed or not a titlepatch document."""


# ── Packages ─────────────────────────────────────────────────────────────────
class DownloadError(UpdateToolError):
    """Base for package download failures."""


class TransportError(DownloadError):
    """Network failure while a package was being fetched."""

    def __init__(self, url: str, message: str) -> None:
        self.url = url
        super().__init__(message)


class IntegrityError(DownloadError):
    """
    The file on disk does not have the byte length the manifest announced.

    Size is the only signal the CDN offers, so this check is weak: a payload
    corrupted without changing its length passes.

    Attributes
    ----------
    path     : File that failed the check (already moved aside, see download.py).
    expected : Byte count from the manifest.
    actual   : Byte count found on disk, or None when the write itself failed.
    """

    def __init__(self, path: Path, expected: Optional[int], actual: Optional[int]) -> None:
        self.path = path
        self.expected = expected
        self.actual = actual
        got = "incomplete write" if actual is None else f"{actual:,} bytes"
        exp = "?" if expected is None else f"{expected:,} bytes"
        super().__init__(f"Size mismatch for {path.name}: expected {exp}, got {got}.")
