#!/usr/bin/env python3
"""
skycast Entry Point

Runs the CLI straight from a source checkout, without installing:
    python run_skycast.py "Paris,FR"
    python run_skycast.py --code 800 --animate --duration 5
"""

import os
import sys


def setup_path():
    """Setup Python path for running from a checkout."""
    if getattr(sys, 'frozen', False):
        # Running as compiled executable
        base_path = sys._MEIPASS
    else:
        base_path = os.path.dirname(os.path.abspath(__file__))

    if base_path not in sys.path:
        sys.path.insert(0, base_path)


def main():
    """Main entry point."""
    setup_path()

    from skycast.cli import main as cli_main
    sys.exit(cli_main())


if __name__ == '__main__':
    main()
