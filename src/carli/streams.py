"""
Input and output streams for commands.

Commands never touch sys.stdin/sys.stdout/sys.stderr directly. They go
through a Streams context instead, which is either wired to the process
consoles (Standard) or to in-memory buffers (Memory) so the exact same
command can be exercised from tests::

    def example(streams: Streams) -> None:
        outputln(streams, "Hello, world!")

    example(standard())          # prints to stdout

    streams = memory()
    example(streams)
    assert streams.output_bytes() == b"Hello, world!\\n"
"""
from __future__ import annotations

import enum
import io
import logging
import sys
import threading
from typing import Any, Callable, Optional, TypeVar, Union

from .errors import ContractViolation, format_message

logger = logging.getLogger("carli.streams")

R = TypeVar("R")


class StreamKind(enum.Enum):
    MEMORY = "memory"
    ERROR = "error"
    INPUT = "input"
    OUTPUT = "output"


# Console kinds resolve the sys attribute on every call so that
# redirect_stdout()/redirect_stderr() and friends are honoured.
_CONSOLES = {
    StreamKind.ERROR: "stderr",
    StreamKind.INPUT: "stdin",
    StreamKind.OUTPUT: "stdout",
}

_READABLE = {StreamKind.MEMORY, StreamKind.INPUT}
_WRITABLE = {StreamKind.MEMORY, StreamKind.ERROR, StreamKind.OUTPUT}


class Stream:
    """
    A byte stream backed by either an in-memory buffer or one of the
    process consoles.

    Capabilities depend on the kind:

    ========  ====  =====  ====
    kind      read  write  seek
    ========  ====  =====  ====
    MEMORY    yes   yes    yes
    ERROR     no    yes    no
    INPUT     yes   no     no
    OUTPUT    no    yes    no
    ========  ====  =====  ====

    Unsupported operations raise ContractViolation.
    """

    __slots__ = ("kind", "_buffer")

    def __init__(self, kind: StreamKind, buffer: Optional[io.BytesIO] = None):
        if kind is StreamKind.MEMORY:
            buffer = buffer if buffer is not None else io.BytesIO()
        elif buffer is not None:
            raise ContractViolation(f"A {kind.value} stream cannot own a memory buffer.")
        self.kind = kind
        self._buffer = buffer

    @classmethod
    def memory(cls, data: bytes = b"") -> "Stream":
        """A seekable in-memory stream positioned at the start of ``data``."""
        return cls(StreamKind.MEMORY, io.BytesIO(data))

    @classmethod
    def stderr(cls) -> "Stream":
        return cls(StreamKind.ERROR)

    @classmethod
    def stdin(cls) -> "Stream":
        return cls(StreamKind.INPUT)

    @classmethod
    def stdout(cls) -> "Stream":
        return cls(StreamKind.OUTPUT)

    def readable(self) -> bool:
        return self.kind in _READABLE

    def writable(self) -> bool:
        return self.kind in _WRITABLE

    def seekable(self) -> bool:
        return self.kind is StreamKind.MEMORY

    def _console(self):
        return getattr(sys, _CONSOLES[self.kind])

    def _unsupported(self, operation: str) -> ContractViolation:
        return ContractViolation(f"A {self.kind.value} stream does not support {operation}.")

    def read(self, size: int = -1) -> bytes:
        if self.kind is StreamKind.MEMORY:
            return self._buffer.read(size)
        if self.kind is StreamKind.INPUT:
            console = self._console()
            raw = getattr(console, "buffer", None)
            if raw is not None:
                return raw.read(size)
            return console.read(size).encode("utf-8")
        raise self._unsupported("reading")

    def readline(self, size: int = -1) -> bytes:
        if self.kind is StreamKind.MEMORY:
            return self._buffer.readline(size)
        if self.kind is StreamKind.INPUT:
            console = self._console()
            raw = getattr(console, "buffer", None)
            if raw is not None:
                return raw.readline(size)
            return console.readline(size).encode("utf-8")
        raise self._unsupported("reading")

    def write(self, data: Union[bytes, bytearray, str]) -> int:
        """Write bytes, or text encoded as UTF-8. Returns the number of bytes written."""
        if isinstance(data, str):
            data = data.encode("utf-8")

        if self.kind is StreamKind.MEMORY:
            return self._buffer.write(data)
        if self.kind in (StreamKind.ERROR, StreamKind.OUTPUT):
            console = self._console()
            raw = getattr(console, "buffer", None)
            if raw is None:
                console.write(bytes(data).decode("utf-8", errors="replace"))
                return len(data)
            # keep ordering with text already pending on the console
            console.flush()
            written = raw.write(data)
            raw.flush()
            return written
        raise self._unsupported("writing")

    def flush(self) -> None:
        if self.kind is StreamKind.MEMORY:
            return
        if self.kind in (StreamKind.ERROR, StreamKind.OUTPUT):
            self._console().flush()
            return
        raise self._unsupported("flushing")

    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        if self.kind is not StreamKind.MEMORY:
            raise self._unsupported("seeking")
        return self._buffer.seek(offset, whence)

    def tell(self) -> int:
        if self.kind is not StreamKind.MEMORY:
            raise self._unsupported("seeking")
        return self._buffer.tell()

    def rewind(self) -> None:
        self.seek(0)

    def clear(self) -> None:
        """Empty a memory stream and move back to its start."""
        if self.kind is not StreamKind.MEMORY:
            raise self._unsupported("clearing")
        self._buffer.seek(0)
        self._buffer.truncate(0)

    def to_bytes(self) -> bytes:
        """A copy of the whole memory buffer, regardless of position."""
        if self.kind is not StreamKind.MEMORY:
            raise self._unsupported("snapshots")
        return self._buffer.getvalue()

    def to_string(self) -> str:
        """Read from the current position to the end and decode it as UTF-8."""
        return self.read().decode("utf-8")

    def to_string_lossy(self) -> str:
        """Like to_string(), replacing invalid UTF-8 sequences with U+FFFD."""
        return self.read().decode("utf-8", errors="replace")

    def __repr__(self) -> str:
        return f"Stream({self.kind.value})"


class Shared:
    """
    A lock-guarded stream handle. Use it as a context manager to hold the
    stream for longer than a single accessor call::

        with streams.to_output() as stream:
            stream.write(b"one")
            stream.write(b"two")

    Locking a handle that the current thread already holds raises
    ContractViolation rather than deadlocking.
    """

    def __init__(self, stream: Stream, role: str):
        self._stream = stream
        self._role = role
        self._lock = threading.Lock()
        self._owner: Optional[int] = None

    @property
    def role(self) -> str:
        return self._role

    def locked(self) -> bool:
        return self._lock.locked()

    def acquire(self) -> Stream:
        me = threading.get_ident()
        if self._owner == me:
            raise ContractViolation(f"The {self._role} stream is already locked by this thread.")
        self._lock.acquire()
        self._owner = me
        return self._stream

    def release(self) -> None:
        if self._owner != threading.get_ident():
            raise ContractViolation(f"The {self._role} stream is not locked by this thread.")
        self._owner = None
        self._lock.release()

    def __enter__(self) -> Stream:
        return self.acquire()

    def __exit__(self, exc_type, exc, tb) -> bool:
        self.release()
        return False


class Streams:
    """
    The execution context shared by commands: one independently locked
    stream per role (error, input, output).
    """

    def __init__(self, error: Stream, input: Stream, output: Stream):
        self._error = Shared(error, "error")
        self._input = Shared(input, "input")
        self._output = Shared(output, "output")

    def error(self, fn: Callable[[Stream], R]) -> R:
        """Call ``fn`` with the locked error stream and return its result."""
        with self._error as stream:
            return fn(stream)

    def input(self, fn: Callable[[Stream], R]) -> R:
        """Call ``fn`` with the locked input stream and return its result."""
        with self._input as stream:
            return fn(stream)

    def output(self, fn: Callable[[Stream], R]) -> R:
        """Call ``fn`` with the locked output stream and return its result."""
        with self._output as stream:
            return fn(stream)

    def to_error(self) -> Shared:
        return self._error

    def to_input(self) -> Shared:
        return self._input

    def to_output(self) -> Shared:
        return self._output


class Standard(Streams):
    """Streams wired to the process stderr, stdin and stdout."""

    def __init__(self):
        super().__init__(Stream.stderr(), Stream.stdin(), Stream.stdout())


class Memory(Streams):
    """Streams wired to in-memory buffers, with helpers for tests."""

    def __init__(self):
        super().__init__(Stream.memory(), Stream.memory(), Stream.memory())

    def reset(self) -> None:
        self.reset_error()
        self.reset_input()
        self.reset_output()

    def reset_error(self) -> None:
        self.error(Stream.clear)

    def reset_input(self) -> None:
        self.input(Stream.clear)

    def reset_output(self) -> None:
        self.output(Stream.clear)

    def set_input(self, data: Union[bytes, str]) -> None:
        """Replace the input stream contents and rewind it for reading."""

        def _fill(stream: Stream) -> None:
            stream.clear()
            stream.write(data)
            stream.rewind()

        self.input(_fill)
        logger.debug("Input stream seeded with %d bytes", len(data))

    def error_bytes(self) -> bytes:
        return self.error(Stream.to_bytes)

    def input_bytes(self) -> bytes:
        return self.input(Stream.to_bytes)

    def output_bytes(self) -> bytes:
        return self.output(Stream.to_bytes)


def standard() -> Standard:
    return Standard()


def memory() -> Memory:
    return Memory()


def write_error(streams: Streams, message: str, *args: Any, **kwargs: Any) -> int:
    text = format_message(message, args, kwargs)
    return streams.error(lambda stream: stream.write(text))


def errorln(streams: Streams, message: str = "", *args: Any, **kwargs: Any) -> int:
    """Write a formatted line to the error stream."""
    return write_error(streams, message + "\n", *args, **kwargs)


def write_output(streams: Streams, message: str, *args: Any, **kwargs: Any) -> int:
    text = format_message(message, args, kwargs)
    return streams.output(lambda stream: stream.write(text))


def outputln(streams: Streams, message: str = "", *args: Any, **kwargs: Any) -> int:
    """Write a formatted line to the output stream."""
    return write_output(streams, message + "\n", *args, **kwargs)
