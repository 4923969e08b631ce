"""Allow ``python -m tagbridge``."""

import sys

from tagbridge.ui.cli import main

if __name__ == "__main__":
    sys.exit(main())
