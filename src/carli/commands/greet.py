from __future__ import annotations
import logging
from argparse import ArgumentParser, _SubParsersAction
from ..command import Command
from ..errors import EXIT_FAILURE, context, error
from ..streams import Stream, outputln
from . import register

logger = logging.getLogger("carli.greet")


class Greet(Command):
    """Greet whoever is named on the input stream."""

    def execute(self, app) -> None:
        with context(lambda: "Unable to read a name from the input stream."):
            raw = app.streams.input(Stream.to_string)

        name = raw.strip()
        if not name:
            raise error(EXIT_FAILURE, "No name was provided.")

        logger.debug("Read name of %d characters", len(name))
        outputln(app.streams, "Hello, {}!", name)


@register
def register_greet(subparsers: _SubParsersAction) -> None:
    parser: ArgumentParser = subparsers.add_parser(
        "greet",
        help="Greet the name read from standard input.",
        description="Read a name from standard input and say hello.",
    )
    parser.set_defaults(command=Greet)
