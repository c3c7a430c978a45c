from __future__ import annotations
import sys
from typing import Optional
from .cli import run_cli
from .streams import Streams

def main(argv: list[str] | None = None, streams: Optional[Streams] = None) -> int:
    return run_cli(argv, streams)

if __name__ == "__main__":
    sys.exit(main())
