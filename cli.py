"""Run deepcli from a source checkout.

Usage examples:
- python cli.py "hello"
- python cli.py -m r1 --json "answer in JSON"
- python cli.py -i
"""
from src.deepcli.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
