#!/usr/bin/env python3
"""
Manage the clinic site copy from the command line:
  - FAQ list / add / delete on the local locale files
  - timestamped snapshots of the locale files
  - migration of the locale files into the content store

This is a thin entrypoint that delegates to the CLI implementation.
"""
from __future__ import annotations

from clinic_content_api.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
