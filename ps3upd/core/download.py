# ps3upd/core/download.py
from __future__ import annotations
from pathlib import Path
from typing import Callable, Optional
import logging

import requests

from .errors import IntegrityError, TransportError

logger = logging.getLogger(__name__)

ProgressCB = Callable[[int, int], None]  # (downloaded_bytes, total_bytes)

BAD_SUFFIX = ".bad"

def _quarantine(path: Path) -> Path:
    """Move a failed download to <name>.bad so it is never taken for a good package."""
    bad = path.with_name(path.name + BAD_SUFFIX)
    try:
        path.replace(bad)
    except OSError as e:
        logger.warning("Could not move %s aside: %s", path, e)
        return path
    return bad

def download_package(
    session: requests.Session,
    url: str,
    out_path: Path,
    expected_size: Optional[int],
    timeout: float = 30,
    on_progress: Optional[ProgressCB] = None,
    chunk_size: int = 128 * 1024,
) -> Path:
    """
    Stream *url* straight into *out_path* (overwriting), then compare the
    on-disk length with *expected_size*.

    - Transport failure -> TransportError
    - Short/long file or failed write -> IntegrityError, file renamed *.bad
    - expected_size None -> no size check (logged)

    The HTTP status is only logged: the CDN does not report failures reliably,
    the byte count is what decides.
    """
    logger.debug("Starting download %s -> %s", url, out_path)
    total = expected_size or 0
    downloaded = 0
    opened = False
    try:
        with session.get(url, stream=True, timeout=timeout) as r:
            if r.status_code >= 400:
                logger.warning("Server answered HTTP %d for %s", r.status_code, url)
            if not total:
                total = int(r.headers.get("Content-Length", "0") or 0)
            with open(out_path, "wb") as f:
                opened = True
                for chunk in r.iter_content(chunk_size=chunk_size):
                    if not chunk:
                        continue
                    f.write(chunk)
                    downloaded += len(chunk)
                    if on_progress:
                        on_progress(downloaded, total)
    except requests.RequestException as exc:
        # A partial file is as unusable as a short one
        if opened:
            _quarantine(out_path)
        raise TransportError(url, f"Network error downloading {out_path.name}: {exc}") from exc
    except OSError as exc:
        bad = _quarantine(out_path) if opened else out_path
        raise IntegrityError(bad, expected_size, None) from exc
    except BaseException:
        # Ctrl+C or a failing progress callback still leaves a truncated file
        if opened:
            _quarantine(out_path)
        raise

    actual = out_path.stat().st_size
    logger.debug("Download finished: %s (%d bytes)", out_path, actual)

    if expected_size is None:
        logger.warning("Manifest gives no size for %s; size check skipped", out_path.name)
        return out_path
    if actual != expected_size:
        raise IntegrityError(_quarantine(out_path), expected_size, actual)
    logger.info("Verified %s (%d bytes)", out_path.name, actual)
    return out_path
