from __future__ import annotations

import logging
import sys
from contextlib import ContextDecorator
from typing import Any, Callable, NoReturn, Optional, TextIO, Tuple, Union

logger = logging.getLogger("carli.errors")

EXIT_OK = 0
EXIT_FAILURE = 1       # default status for any error
EXIT_USAGE = 2         # bad CLI usage, missing subcommand, etc.
EXIT_INTERRUPTED = 130


class ContractViolation(RuntimeError):
    """
    Raised when a program breaks the toolkit's usage contract, e.g. reading
    from an output-only stream or locking a stream twice from one thread.

    This is a programming error, not a reportable failure: it is never
    converted into a CarliError.
    """


def format_message(message: str, args: Tuple[Any, ...], kwargs: dict) -> str:
    if args or kwargs:
        return message.format(*args, **kwargs)
    return message


class CarliError(Exception):
    """
    User-facing error carrying an exit status, an optional root message and
    a stack of context annotations added as the error propagates.

    Args:
        status: Process exit code used by exit(). Defaults to 1.
    """

    def __init__(self, status: int = EXIT_FAILURE):
        super().__init__()
        self.status = int(status)
        self._message: Optional[str] = None
        self._context: Optional[list[str]] = None

    def message(self, text: str) -> "CarliError":
        """Set (or replace) the root message."""
        self._message = str(text)
        return self

    def context(self, text: str) -> "CarliError":
        """Append a context annotation; the latest one is displayed first."""
        if self._context is None:
            self._context = []
        self._context.append(str(text))
        return self

    def get_status(self) -> int:
        return self.status

    def get_message(self) -> Optional[str]:
        return self._message

    def get_context(self) -> Optional[Tuple[str, ...]]:
        # an emptied list still reads as "no context"
        if not self._context:
            return None
        return tuple(self._context)

    def render(self) -> str:
        """
        Render the display form: context lines from the most recently added
        to the oldest, each one indented two spaces deeper than the previous,
        followed by the root message at the deepest level.
        """
        lines = []
        depth = 0
        for text in reversed(self._context or []):
            lines.append(f"{'  ' * depth}{text}\n")
            depth += 1
        if self._message is not None:
            lines.append(f"{'  ' * depth}{self._message}\n")
        return "".join(lines)

    def exit(self, stream: Optional[TextIO] = None) -> NoReturn:
        """
        Print the display form (if there is anything to print) and terminate
        the process with this error's status.
        """
        if self._message is not None or self.get_context() is not None:
            target = stream if stream is not None else sys.stderr
            # render() already ends each line; no extra blank line is added
            target.write(self.render())
            target.flush()
        sys.exit(self.status)

    @classmethod
    def from_exception(cls, exc: BaseException) -> "CarliError":
        """
        Convert an exception and its chain of explicit causes (``raise ... from``).

        Every exception that has a cause contributes its text as context, in
        the order visited (outermost first). The terminal cause becomes the
        message; when it is an OSError with an errno, the errno becomes the
        status. A CarliError met along the chain ends the walk: its status,
        message and context are copied and the outer texts are appended after.
        """
        if isinstance(exc, CarliError):
            return exc

        outer = []
        current = exc
        seen = {id(current)}
        while not isinstance(current, CarliError):
            cause = current.__cause__
            if cause is None or id(cause) in seen:
                break
            outer.append(str(current))
            current = cause
            seen.add(id(current))

        if isinstance(current, CarliError):
            error = cls(current.status)
            error._message = current._message
            error._context = list(current._context) if current._context else None
        else:
            error = cls()
            error.message(str(current))
            if isinstance(current, OSError) and current.errno is not None:
                error.status = current.errno

        for text in outer:
            error.context(text)

        logger.debug(
            "Converted %s (status=%d, chain=%d)",
            type(exc).__name__,
            error.status,
            len(seen),
        )
        return error

    def __str__(self) -> str:
        return self.render()

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(status={self.status!r}, "
            f"message={self._message!r}, context={self.get_context()!r})"
        )


def error(status: int = EXIT_FAILURE, message: Optional[str] = None, *args: Any, **kwargs: Any) -> CarliError:
    """
    Build a CarliError, formatting ``message`` with ``str.format`` when
    arguments are given::

        raise error(1, "The {} message.", "error")
    """
    err = CarliError(status)
    if message is not None:
        err.message(format_message(message, args, kwargs))
    return err


MessageSource = Union[str, Callable[[], Any]]


class context(ContextDecorator):
    """
    Annotate any failure leaving the wrapped block with a context message.

    ``message`` is usually a zero-argument callable; it is only called when
    the block fails. Exceptions that are not CarliErrors are converted with
    CarliError.from_exception first. Works as a ``with`` block or as a
    decorator::

        with context(lambda: f"Unable to read {path}"):
            data = path.read_bytes()
    """

    def __init__(self, message: MessageSource):
        self._message = message

    def __enter__(self) -> "context":
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if exc is None or not isinstance(exc, Exception) or isinstance(exc, ContractViolation):
            return False

        text = self._message() if callable(self._message) else self._message
        if isinstance(exc, CarliError):
            exc.context(text)
            return False

        raise CarliError.from_exception(exc).context(text) from exc
