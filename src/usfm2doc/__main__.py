"""Module entry point for running with python -m usfm2doc."""

import sys

from usfm2doc.cli import main

if __name__ == "__main__":
    sys.exit(main())
