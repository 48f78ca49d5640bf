#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
UI layer for the PS3 Update Downloader

- Rich status while the manifest is fetched
- Results table of every package the manifest lists
- y/n/a overwrite prompt (adapter for OverwritePolicy.ASK)
- Progress bar while a package streams to disk
"""

from __future__ import annotations
from pathlib import Path
from typing import Optional, Sequence

import requests
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table
from rich import box
from rich.status import Status
from rich.progress import (
    BarColumn, DownloadColumn, Progress, TextColumn, TimeRemainingColumn, TransferSpeedColumn
)

from .core import (
    AppConfig,
    DownloadSummary,
    OverwritePolicy,
    UpdateRecord,
    download_package,
    fetch_manifest,
    make_session,
    parse_manifest,
    run_downloads,
    save_records_json,
    validate_title_id,
)
from .tui import section

console = Console()

# ────────────────────────── Records table ──────────────────────────
def render_records(records: Sequence[UpdateRecord]) -> None:
    table = Table(
        title=f"Available Updates ({len(records)})",
        show_lines=False,
        header_style="bold magenta",
        box=box.SIMPLE_HEAVY
    )
    table.add_column("#", no_wrap=True)
    table.add_column("Title", max_width=40, overflow="ellipsis", no_wrap=True)
    table.add_column("Ver", no_wrap=True)
    table.add_column("Size", no_wrap=True, min_width=9, justify="right")
    table.add_column("Min FW", no_wrap=True)
    table.add_column("File", max_width=40, overflow="ellipsis", no_wrap=True)
    for i, r in enumerate(records, 1):
        table.add_row(str(i), r.title or "-", r.version, r.size_mb, r.system_version or "-", r.filename)
    console.print(table)

def show_record(rec: UpdateRecord, path: Path) -> None:
    console.print(Panel(
        f"[bold cyan]Title:[/] {rec.title or '-'}\n"
        f"[bold cyan]Title ID:[/] {rec.title_id}\n"
        f"[bold cyan]Version:[/] {rec.version}\n"
        f"[bold cyan]Size:[/] {rec.size_mb}\n"
        f"[bold cyan]Min firmware:[/] {rec.system_version or '-'}\n"
        f"[bold cyan]Saving to:[/] {path}",
        title="📦 Update Package",
        border_style="green",
        expand=False
    ))

# ────────────────────────── Overwrite prompt ──────────────────────────
def ask_overwrite(rec: UpdateRecord, path: Path) -> str:
    # No `choices=`: anything unrecognised must count as "no", not re-prompt
    return Prompt.ask(
        f"[yellow]{path.name}[/] already exists. Overwrite? "
        "[bold]y[/]es / [bold]n[/]o / [bold]a[/]ll",
        default="n",
        console=console,
    )

# ────────────────────────── Download ──────────────────────────
def make_fetcher(session: requests.Session, config: AppConfig):
    """Bind download_package to a session and a Rich progress bar."""
    def fetch(rec: UpdateRecord, path: Path) -> Path:
        with Progress(
            TextColumn(f"[bold]Downloading[/] {path.name}", justify="left"),
            BarColumn(),
            DownloadColumn(),
            TransferSpeedColumn(),
            TimeRemainingColumn(),
            console=console,
            transient=False
        ) as progress:
            task_id = progress.add_task("dl", total=rec.size or None)

            def on_progress(done: int, total: int) -> None:
                progress.update(task_id, completed=done, total=total or None)

            out = download_package(
                session, rec.url, path, rec.size,
                timeout=config.timeout, on_progress=on_progress,
            )
        console.print(f"[green]Verified[/] {out.name} ({rec.size_mb})")
        return out
    return fetch

def render_summary(summary: DownloadSummary) -> None:
    console.print(
        f"\n[bold]Done.[/] downloaded={len(summary.downloaded)} "
        f"skipped={len(summary.skipped)} failed={len(summary.failed)}"
    )
    for rec, exc in summary.failed:
        console.print(f"  [red]✗[/] {rec.filename}: {exc}")

def report_error(exc: BaseException) -> None:
    console.print(f"[red]Error:[/] {exc}")
    cause = exc.__cause__
    if cause is not None:
        console.print(f"[dim]cause: {cause}[/]")

# ────────────────────────── Main flow ──────────────────────────
def run_update_flow(
    raw_title_id: str,
    config: AppConfig,
    *,
    list_only: bool = False,
    json_out: Optional[Path] = None,
    keep_going: bool = False,
) -> Optional[DownloadSummary]:
    """
    Validate → fetch → parse → (export) → download. Raises UpdateToolError
    on the first fatal problem; returns None when nothing was downloaded
    by choice (list-only).
    """
    title_id = validate_title_id(raw_title_id, config.known_prefixes)
    section(
        console,
        f"Updates for {title_id}",
        f"Output: {config.target_dir}\n"
        f"TLS verify: {'on' if config.verify_tls else 'OFF (insecure)'} · Overwrite: {config.overwrite}"
    )

    with make_session(config) as session:
        with Status(f"[bold]Fetching manifest…[/] {title_id}", console=console, spinner="dots"):
            text = fetch_manifest(session, title_id, config)
        records = parse_manifest(text)

        if not records:
            console.print(f"[yellow]The manifest for {title_id} lists no packages.[/]")
        else:
            render_records(records)

        if json_out is not None:
            save_records_json(records, json_out)
            console.print(f"[green]Saved[/] {len(records)} record(s) to [bold]{json_out}[/]")

        if list_only:
            return None

        config.target_dir.mkdir(parents=True, exist_ok=True)
        summary = run_downloads(
            records,
            config.target_dir,
            OverwritePolicy(config.overwrite),
            fetch=make_fetcher(session, config),
            ask=ask_overwrite,
            on_record=show_record,
            keep_going=keep_going,
        )
    render_summary(summary)
    return summary
