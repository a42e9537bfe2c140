"""Entry point for python -m naminator."""

import sys

from naminator.cli.main import main

if __name__ == "__main__":
    sys.exit(main())
