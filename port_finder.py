import sys

from portfinder.cli import main

if __name__ == "__main__":
    sys.exit(main())
