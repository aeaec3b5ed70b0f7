import sys

from codehost.cli.main import main

if __name__ == "__main__":
    sys.exit(main())
