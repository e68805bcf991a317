"""
Run with: python -m elevationprofile [MODEL]
"""
import sys

from elevationprofile.main import main

if __name__ == "__main__":
    sys.exit(main())
