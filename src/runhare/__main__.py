"""
Entry point for running runhare as a module.

Allows running the CLI via:
    python -m runhare send <event> <json>
"""

import sys

from runhare.cli import main

if __name__ == "__main__":
    sys.exit(main())
