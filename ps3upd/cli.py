# ps3upd/cli.py
from __future__ import annotations
import argparse
from pathlib import Path
from typing import List, Optional

from . import __version__
from .core import AppConfig, UpdateToolError, load_cfg, save_cfg, setup_logging
from .core.config import OVERWRITE_CHOICES, positive_float
from .ui import console, report_error, run_update_flow

def _timeout_arg(raw: str) -> float:
    value = positive_float(raw, 0.0)
    if not value:
        raise argparse.ArgumentTypeError(f"must be a number of seconds above 0, got {raw!r}")
    return value

def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(description="PS3 Update Downloader")
    ap.add_argument("title_id", help="Title ID, e.g. BLUS30181")
    ap.add_argument("--out", type=Path, help="Output directory (default ~/PS3_Updates)")
    ap.add_argument("--overwrite", choices=OVERWRITE_CHOICES,
                    help="Existing files: ask each time, overwrite all, or skip")
    tls = ap.add_mutually_exclusive_group()
    tls.add_argument("--verify-tls", dest="verify_tls", action="store_true", default=None,
                     help="Verify the CDN's TLS certificate")
    tls.add_argument("--insecure", dest="verify_tls", action="store_false",
                     help="Do NOT verify TLS certificates (default for the vendor CDN)")
    ap.add_argument("--timeout", type=_timeout_arg, help="Network timeout in seconds")
    ap.add_argument("--list", dest="list_only", action="store_true",
                    help="Only list the available updates")
    ap.add_argument("--json", dest="json_out", type=Path, help="Also save the update list as JSON")
    ap.add_argument("--keep-going", action="store_true",
                    help="Continue with the next package when one fails")
    ap.add_argument("--save-defaults", action="store_true",
                    help="Remember --out/--overwrite/TLS/--timeout for next runs")
    ap.add_argument("--verbose", action="store_true", help="Enable debug logging for core/network")
    ap.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return ap.parse_args(argv)

def build_config(args: argparse.Namespace) -> AppConfig:
    base = AppConfig.from_sources(load_cfg())
    return base.with_overrides(
        target_dir=args.out.expanduser() if args.out else None,
        overwrite=args.overwrite,
        verify_tls=args.verify_tls,
        timeout=args.timeout,
    )

def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging(verbose=args.verbose)
    try:
        config = build_config(args)
        if args.save_defaults:
            console.print(f"[dim]Defaults saved to {save_cfg(config.to_cfg())}[/]")
        summary = run_update_flow(
            args.title_id, config,
            list_only=args.list_only,
            json_out=args.json_out,
            keep_going=args.keep_going,
        )
    except UpdateToolError as e:
        report_error(e)
        return 1
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user.[/]")
        return 130
    if summary is not None and not summary.ok:
        return 1
    return 0
