#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
PS3 Update Downloader

What it does
------------
• Validates a title ID (BLUS30181, NPEB00001, …) against known region prefixes.
• Fetches the title's update manifest from the PlayStation CDN.
• Lists every update package (version, size, minimum firmware).
• Downloads them into ~/PS3_Updates and checks each file's byte size
  against the manifest.

Install:  pip install -e .
Run:      python ps3_update_downloader.py BLUS30181
Flags:    python ps3_update_downloader.py BLUS30181 --out D:/ps3 --overwrite all
"""

from ps3upd.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
