#!/usr/bin/env python3
"""
Canvas Shell entry script.

Equivalent to the installed `canvas-shell` command.

Usage:
    python cli.py --help
    python cli.py                       # Interactive shell
    python cli.py run context tree
    python cli.py --debug ping
"""

import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from canvas_shell.cli.app import app

if __name__ == "__main__":
    app()
