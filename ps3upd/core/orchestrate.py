"""
ps3upd/core/orchestrate.py – Walk the update records and decide, per record,
whether to download.

No console I/O here: the overwrite policy is a value, and the interactive
prompt is just an ``ask`` callable supplied by the UI.
"""
from __future__ import annotations
import enum
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Tuple

from .errors import DownloadError
from .models import UpdateRecord

logger = logging.getLogger(__name__)


class OverwritePolicy(str, enum.Enum):
    ASK = "ask"     # prompt on every existing file
    ALL = "all"     # overwrite without asking, for the rest of the run
    SKIP = "skip"   # keep every existing file


AskFn = Callable[[UpdateRecord, Path], str]
FetchFn = Callable[[UpdateRecord, Path], Path]
RecordFn = Callable[[UpdateRecord, Path], None]


@dataclass
class DownloadSummary:
    downloaded: List[Path] = field(default_factory=list)
    skipped: List[Path] = field(default_factory=list)
    failed: List[Tuple[UpdateRecord, DownloadError]] = field(default_factory=list)
    final_policy: OverwritePolicy = OverwritePolicy.ASK

    @property
    def ok(self) -> bool:
        return not self.failed


def parse_answer(raw: Optional[str]) -> str:
    """Map a prompt answer to 'yes', 'all' or 'no' (the default)."""
    a = (raw or "").strip().lower()
    if a in ("y", "yes"):
        return "yes"
    if a in ("a", "all"):
        return "all"
    return "no"


def run_downloads(
    records: Iterable[UpdateRecord],
    target_dir: Path,
    policy: OverwritePolicy,
    *,
    fetch: FetchFn,
    ask: Optional[AskFn] = None,
    on_record: Optional[RecordFn] = None,
    keep_going: bool = False,
) -> DownloadSummary:
    """
    Download *records* one after the other into *target_dir*.

    Missing files are always fetched. Existing ones go through *policy*:
    ASK calls ``ask(record, path)`` (yes = this one, all = switch to ALL,
    anything else = skip); ALL never asks again; SKIP keeps the file.

    A DownloadError stops the run unless *keep_going* is set, in which case
    it is recorded in the summary and the next record is tried.
    """
    policy = OverwritePolicy(policy)
    if policy is OverwritePolicy.ASK and ask is None:
        raise ValueError("OverwritePolicy.ASK needs an ask callable")

    summary = DownloadSummary(final_policy=policy)
    for rec in records:
        path = target_dir / rec.filename

        if path.exists():
            if policy is OverwritePolicy.SKIP:
                logger.info("Keeping existing %s", path.name)
                summary.skipped.append(path)
                continue
            if policy is OverwritePolicy.ASK:
                answer = parse_answer(ask(rec, path))
                if answer == "no":
                    logger.info("Skipped %s", path.name)
                    summary.skipped.append(path)
                    continue
                if answer == "all":
                    policy = OverwritePolicy.ALL
                    logger.debug("Overwriting all remaining files")

        if on_record:
            on_record(rec, path)
        logger.info("Downloading %s %s v%s (%s)", rec.title_id, rec.title, rec.version, rec.size_mb)
        try:
            summary.downloaded.append(fetch(rec, path))
        except DownloadError as exc:
            if not keep_going:
                raise
            logger.error("%s: %s", path.name, exc)
            summary.failed.append((rec, exc))

    summary.final_policy = policy
    return summary
