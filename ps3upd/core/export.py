from __future__ import annotations
import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Sequence

from .models import UpdateRecord

logger = logging.getLogger(__name__)

def save_records_json(records: Sequence[UpdateRecord], path: Path) -> Path:
    """Write the parsed records plus a timestamp and count as UTF-8 JSON."""
    data = {
        "scrape_date": datetime.now().isoformat(timespec="seconds"),
        "total_updates": len(records),
        "updates": [r.to_dict() for r in records],
    }
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
    logger.info("Saved %d update(s) to %s", len(records), path)
    return path
