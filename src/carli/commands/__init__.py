from __future__ import annotations
from argparse import ArgumentParser
from typing import Callable, List
import importlib
import pkgutil

# Registry stores callables that will attach themselves to argparse subparsers.
# Each "registrar" is a function with signature: registrar(subparsers) -> None
_REGISTRY: List[Callable] = []

def register(registrar: Callable) -> Callable:
    """Decorator to add a subcommand registrar to the global registry."""
    if registrar not in _REGISTRY:
        _REGISTRY.append(registrar)
    return registrar

def autodiscover() -> None:
    """
    Import all submodules under carli.commands so their @register decorators run.
    Safe to call multiple times (subsequent imports are no-ops).
    """
    package_name = __name__  # "carli.commands"
    for module_info in pkgutil.iter_modules(__path__):  # type: ignore[name-defined]
        importlib.import_module(f"{package_name}.{module_info.name}")

def get_registry() -> List[Callable]:
    return list(_REGISTRY)

def add_greeting_arguments(parser: ArgumentParser) -> None:
    parser.add_argument("--name", default=None, help="Name to greet.")
    parser.add_argument("--yell", action="store_true", help="End the greeting with an exclamation mark.")
