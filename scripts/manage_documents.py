#!/usr/bin/env python3
"""
CLI utility to list, upload, delete and reorder stored documents.

Usage:
    uv run scripts/manage_documents.py --backend local upload ./report.pdf
    uv run scripts/manage_documents.py reorder report.pdf=1 notes.txt=2
"""

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app.documents.cli import main


if __name__ == "__main__":
    sys.exit(main())
