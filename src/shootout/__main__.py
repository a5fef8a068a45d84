"""Entry point for `python -m shootout`."""

import sys

from shootout.cli.__main__ import main

if __name__ == "__main__":
    sys.exit(main())
