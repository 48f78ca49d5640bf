# ps3upd/core/__init__.py
from .config import AppConfig, config_path, load_cfg, save_cfg
from .download import download_package
from .errors import (
    UpdateToolError, ValidationError, FormatError, UnsupportedIdentifierError,
    FetchError, ParseError, DownloadError, TransportError, IntegrityError,
)
from .export import save_records_json
from .http import make_session
from .manifest import fetch_manifest, parse_manifest
from .models import UpdateRecord
from .orchestrate import DownloadSummary, OverwritePolicy, run_downloads
from .utils import bytes_to_mb, safe_filename, url_leaf_name
from .validate import validate_title_id

__all__ = [
    "AppConfig", "config_path", "load_cfg", "save_cfg",
    "download_package",
    "UpdateToolError", "ValidationError", "FormatError", "UnsupportedIdentifierError",
    "FetchError", "ParseError", "DownloadError", "TransportError", "IntegrityError",
    "save_records_json",
    "make_session",
    "fetch_manifest", "parse_manifest",
    "UpdateRecord",
    "DownloadSummary", "OverwritePolicy", "run_downloads",
    "bytes_to_mb", "safe_filename", "url_leaf_name",
    "validate_title_id",
    "setup_logging",
]

# ---- simple logging toggle for the package ----
import logging

def setup_logging(verbose: bool = False) -> None:
    # Rich output covers the normal case; logs show up on problems or with --verbose
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s %(name)s: %(message)s"
    )
    # quiet down noisy deps
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("requests").setLevel(logging.WARNING)
