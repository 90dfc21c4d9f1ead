"""Entry point for ``python -m har_recorder`` and the ``har-recorder`` script."""

from __future__ import annotations

import sys


def main() -> None:
    """Run the Typer app, or explain how to install it."""
    try:
        from har_recorder.cli.main import app
    except ImportError as e:
        print(f"The har-recorder command line needs Typer ({e}).", file=sys.stderr)
        print("Install it with: pip install har-recorder[cli]", file=sys.stderr)
        print("Statistics are also available from Python: har_recorder.load_har_metrics()", file=sys.stderr)
        sys.exit(1)

    app()


if __name__ == "__main__":
    main()
