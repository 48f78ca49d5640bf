#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Shared console helpers (header, sections) for the PS3 Update Downloader.
"""
from __future__ import annotations
import platform
from rich.console import Console
from rich.panel import Panel

def get_system_label() -> str:
    return f"[dim]Running on {platform.system()} {platform.release()}[/]"

def header_art() -> str:
    return r"""
 ___  ___ ____    _   _           _       _
| _ \/ __|__ /   | | | |_ __  __| |__ _| |_ ___
|  _/\__ \|_ \   | |_| | '_ \/ _` / _` |  _/ -_)
|_|  |___/___/    \___/| .__/\__,_\__,_|\__\___|
                       |_|
"""

def get_full_header() -> str:
    h = header_art().rstrip()
    s = get_system_label()
    return f"[bold magenta]{h}[/]\n{s}"

def section(console: Console, title: str, subtitle: str = "") -> None:
    msg = f"{get_full_header()}\n\n[bold]{title}[/]"
    if subtitle:
        msg += f"\n[dim]{subtitle}[/]"
    console.print(Panel.fit(msg, border_style="magenta"))
