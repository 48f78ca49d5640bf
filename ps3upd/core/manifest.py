"""
ps3upd/core/manifest.py – Fetch and parse the per-title update manifest.

The CDN serves one ``titlepatch`` document per title::

    <titlepatch titleid="BLUS30181">
      <tag name="BLUS30181_T5">
        <package version="01.01" size="..." url="..." ps3_system_ver="03.4000">
          <paramsfo><TITLE>Game</TITLE></paramsfo>
        </package>
      </tag>
    </titlepatch>
"""
from __future__ import annotations
import logging
import xml.etree.ElementTree as ET
from typing import List, Optional

import requests

from .config import AppConfig
from .errors import FetchError, ParseError
from .models import UpdateRecord
from .utils import bytes_to_mb

logger = logging.getLogger(__name__)

ROOT_TAG = "titlepatch"

# ── Fetch ────────────────────────────────────────────────────────────────────
def fetch_manifest(session: requests.Session, title_id: str, config: AppConfig) -> str:
    url = config.manifest_url(title_id)
    logger.debug("GET %s", url)
    try:
        r = session.get(url, headers={"Accept": "application/xml"}, timeout=config.timeout)
    except requests.RequestException as exc:
        raise FetchError(title_id, f"Network error while fetching manifest for {title_id}: {exc}") from exc

    if not r.ok:
        raise FetchError(title_id, f"No update manifest for {title_id} (HTTP {r.status_code}).")
    body = r.content or b""
    if not body.strip():
        raise FetchError(title_id, f"No updates published for {title_id} (empty manifest).")

    # Titles can be non-ASCII; never let requests guess the charset
    try:
        return body.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise ParseError(f"Manifest for {title_id} is not valid UTF-8: {exc}") from exc

# ── Parse ────────────────────────────────────────────────────────────────────
def _entry_title(pkg: ET.Element) -> str:
    node = pkg.find("paramsfo/TITLE")
    if node is None or not node.text:
        return ""
    return node.text.replace("\r\n", " ").replace("\n", " ").strip()

def _entry_size(pkg: ET.Element) -> Optional[int]:
    raw = (pkg.get("size") or "").strip()
    if not raw:
        return None
    # Plain ASCII digits only: no sign, no "_" separators, no other scripts
    if not (raw.isascii() and raw.isdigit()):
        raise ParseError(f"Package size {raw!r} is not a non-negative integer")
    return int(raw)

def parse_manifest(text: str) -> List[UpdateRecord]:
    """
    Project a titlepatch document into UpdateRecords, in document order.

    Only some entries carry a TITLE. The last non-empty one seen in the whole
    document becomes the display title of every record, so the title is
    resolved in a first pass and the records are built in a second.
    """
    try:
        root = ET.fromstring(text)
    except ET.ParseError as exc:
        raise ParseError(f"Manifest is not well-formed XML: {exc}") from exc

    if root.tag != ROOT_TAG:
        raise ParseError(f"Unexpected manifest root <{root.tag}>, wanted <{ROOT_TAG}>")
    title_id = (root.get("titleid") or "").strip()
    if not title_id:
        raise ParseError("Manifest root carries no titleid")

    packages = list(root.iter("package"))

    inherited = ""
    for pkg in packages:
        t = _entry_title(pkg)
        if t:
            inherited = t

    records = []
    for pkg in packages:
        size = _entry_size(pkg)
        records.append(UpdateRecord(
            title_id=title_id,
            version=pkg.get("version", ""),
            size=size,
            size_mb=bytes_to_mb(size),
            system_version=pkg.get("ps3_system_ver", ""),
            url=pkg.get("url", ""),
            title=inherited,
        ))

    logger.info("Manifest for %s lists %d package(s)", title_id, len(records))
    return records
