"""python -m entrypoint for the tcis CLI."""

from __future__ import annotations

from src.tcis.cli.tcis import main

if __name__ == "__main__":
    raise SystemExit(main())
