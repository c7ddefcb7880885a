"""
Entry point when running as module: python -m pumpcurve
"""

import sys

from pumpcurve.main import main

if __name__ == "__main__":
    sys.exit(main())
