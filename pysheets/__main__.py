import sys

from pysheets.cli.main import main

if __name__ == "__main__":
    sys.exit(main())
