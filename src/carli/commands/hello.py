from __future__ import annotations
import logging
from argparse import ArgumentParser, _SubParsersAction
from ..command import Command
from ..streams import outputln
from . import add_greeting_arguments, register

logger = logging.getLogger("carli.hello")


class Hello(Command):
    def execute(self, app) -> None:
        logger.debug("Preparing greeting")
        outputln(app.streams, "Hello, {}{}", app.name, "!" if self.args.yell else ".")
        logger.info("Greeting sent")


@register
def register_hello(subparsers: _SubParsersAction) -> None:
    parser: ArgumentParser = subparsers.add_parser(
        "hello",
        help="Print a friendly greeting.",
        description="Say hello to someone.",
    )
    add_greeting_arguments(parser)
    parser.set_defaults(command=Hello)
