from __future__ import annotations
import logging
from argparse import ArgumentParser, _SubParsersAction
from ..command import Command
from ..streams import outputln
from . import add_greeting_arguments, register

logger = logging.getLogger("carli.goodbye")


class Goodbye(Command):
    def execute(self, app) -> None:
        outputln(app.streams, "Goodbye, {}{}", app.name, "!" if self.args.yell else ".")
        logger.info("Farewell sent")


@register
def register_goodbye(subparsers: _SubParsersAction) -> None:
    parser: ArgumentParser = subparsers.add_parser(
        "goodbye",
        help="Print a friendly farewell.",
        description="Say goodbye to someone.",
    )
    add_greeting_arguments(parser)
    parser.set_defaults(command=Goodbye)
