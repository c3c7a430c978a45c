from __future__ import annotations

import argparse
import functools
import logging
import os
import sys
from typing import Dict, Optional

from . import __version__
from .command import Command, Main
from .commands import get_registry, autodiscover
from .config import Config, load_config
from .errors import CarliError, ContractViolation, EXIT_INTERRUPTED, EXIT_OK, EXIT_USAGE, error
from .streams import Streams, standard

logger = logging.getLogger("carli")


class StreamArgumentParser(argparse.ArgumentParser):
    """
    ArgumentParser that prints help, usage errors and --version through a
    Streams context instead of the process consoles.
    """

    def __init__(self, *args, streams: Optional[Streams] = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.streams = streams if streams is not None else standard()

    def add_subparsers(self, **kwargs):
        # nested parsers share the same streams
        kwargs.setdefault("parser_class", functools.partial(type(self), streams=self.streams))
        return super().add_subparsers(**kwargs)

    def _print_message(self, message: str, file=None) -> None:
        if not message:
            return
        if file is None or file is sys.stderr:
            self.streams.error(lambda stream: stream.write(message))
        elif file is sys.stdout:
            self.streams.output(lambda stream: stream.write(message))
        else:
            super()._print_message(message, file)


def build_parser(streams: Optional[Streams] = None) -> StreamArgumentParser:
    parser = StreamArgumentParser(
        streams=streams,
        prog="carli",
        description="carli command-line interface.",
    )

    # Global/root flags
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"],
        help="Override log level (default from env/config).",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to a TOML config file to use (highest precedence).",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"carli {__version__}",
        help="Show version and exit.",
    )

    subparsers = parser.add_subparsers(
        title="subcommands",
        dest="subcommand",
        metavar="<command>",
        required=False,
    )
    # Import all subcommand modules so they @register
    autodiscover()

    for registrar in get_registry():
        registrar(subparsers)

    return parser


def _configure_logging(cli_level_name: Optional[str], cfg_level_name: Optional[str]) -> None:
    # Precedence: CLI > ENV > CONFIG > default(WARNING)
    level_name = (
        (cli_level_name or "").strip()
        or (os.getenv("CARLI_LOG_LEVEL") or "").strip()
        or (cfg_level_name or "").strip()
        or "WARNING"
    )
    level = getattr(logging, level_name.upper(), logging.WARNING)

    # force=True so repeated test runs reconfigure handlers
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        force=True,
    )


class Application(Main):
    """The carli program: parsed arguments, effective config and streams."""

    def __init__(self, args: argparse.Namespace, config: Config, sources: Dict[str, str], streams: Streams):
        super().__init__(streams)
        self.args = args
        self.config = config
        self.sources = sources

    @property
    def name(self) -> str:
        # Precedence: CLI --name > env/config (already merged) > default
        name = getattr(self.args, "name", None)
        return name if name is not None else self.config.default_name

    def subcommand(self) -> Command:
        return self.args.command(self.args)


def run_cli(argv: Optional[list[str]] = None, streams: Optional[Streams] = None) -> int:
    """
    Parse ``argv`` and run the selected subcommand against ``streams``
    (the process consoles by default).

    Returns EXIT_OK on success. Failures are written to the error stream and
    end the process through SystemExit carrying the error's status.
    """
    streams = streams if streams is not None else standard()
    parser = build_parser(streams)
    args = parser.parse_args(argv)

    try:
        cfg, sources = load_config(args.config)
        _configure_logging(args.log_level, cfg.log_level)

        if not hasattr(args, "command"):
            parser.print_help(sys.stderr)
            return EXIT_USAGE

        Application(args, cfg, sources, streams).execute()
    except CarliError as e:
        logger.debug("Command failed: %r", e)
        streams.error(e.exit)
    except KeyboardInterrupt:
        streams.error(error(EXIT_INTERRUPTED, "Interrupted.").exit)
    except ContractViolation:
        raise
    except Exception as e:
        logger.debug("Unexpected error: %s", e, exc_info=True)
        streams.error(CarliError.from_exception(e).exit)

    return EXIT_OK
