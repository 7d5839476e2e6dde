"""Allow ``python -m tradesafe_app``."""
import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())
