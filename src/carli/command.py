"""
Scaffolding for applications made of one or more subcommands.

An application (Main) owns the execution context and knows which single
subcommand is active; executing the application simply delegates to that
subcommand. Failures are raised as CarliError and bubble up to the entry
point, which is the only place that calls CarliError.exit().
"""
from __future__ import annotations

import argparse
from typing import Optional

from .streams import Streams


class Command:
    """A subcommand. Subclasses implement execute()."""

    def __init__(self, args: Optional[argparse.Namespace] = None):
        self.args = args if args is not None else argparse.Namespace()

    def execute(self, app: "Main") -> None:
        raise NotImplementedError


class Main:
    """An application that dispatches to its active subcommand."""

    def __init__(self, streams: Streams):
        self.streams = streams

    def subcommand(self) -> Command:
        raise NotImplementedError

    def execute(self) -> None:
        self.subcommand().execute(self)
