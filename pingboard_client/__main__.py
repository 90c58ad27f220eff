"""Entry point for running as a module: python -m pingboard_client."""

import sys

from pingboard_client.cli import main

if __name__ == "__main__":
    sys.exit(main())
