import sys

from sortstepper.cli import main

if __name__ == "__main__":
    sys.exit(main())
