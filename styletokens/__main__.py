"""Entry point for `python -m styletokens`."""

import sys


def main():
    from styletokens.app import run_app
    sys.exit(run_app())


if __name__ == "__main__":
    main()
