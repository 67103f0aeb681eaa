"""mailwatch: tail an MTA mail log and report delivery outcomes."""

import sys

from mailwatch.service import main

if __name__ == "__main__":
    sys.exit(main())
