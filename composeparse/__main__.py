"""Allow ``python -m composeparse``."""
import sys

from composeparse.cli import main

if __name__ == "__main__":
    sys.exit(main())
