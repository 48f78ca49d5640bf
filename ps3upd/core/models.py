from __future__ import annotations
from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional

from .utils import safe_filename, url_leaf_name

@dataclass(frozen=True)
class UpdateRecord:
    title_id: str
    version: str
    size: Optional[int]      # bytes; None when the manifest omits it
    size_mb: str
    system_version: str      # minimum firmware, e.g. "03.4100"
    url: str
    title: str = ""

    @property
    def filename(self) -> str:
        leaf = url_leaf_name(self.url).strip()
        # URLs ending in "/" have no leaf; name the file after the record instead
        return safe_filename(leaf or f"{self.title_id}-{self.version}.pkg")

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["filename"] = self.filename
        return d
