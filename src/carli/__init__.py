from __future__ import annotations

# Resolve package version from installed metadata when available.
# Falls back to a dev/local version when running from source.
try:
    from importlib.metadata import version
    __version__ = version("carli")
except Exception:
    __version__ = "0.0.0+local"

from .errors import CarliError, ContractViolation, context, error
from .streams import Memory, Shared, Standard, Stream, StreamKind, Streams, memory, standard

__all__ = [
    "CarliError",
    "ContractViolation",
    "Memory",
    "Shared",
    "Standard",
    "Stream",
    "StreamKind",
    "Streams",
    "__version__",
    "context",
    "error",
    "memory",
    "standard",
]
