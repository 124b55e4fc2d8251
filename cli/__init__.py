"""CLI package for feeding and querying the heart-rate relay."""

from importlib import import_module
from types import ModuleType


def __getattr__(name: str) -> ModuleType:
    if name == "app":
        return import_module("cli.app")
    raise AttributeError(name)

# The Typer application lives in ``cli.app``. Tests patch attributes on that
# module path, so the Typer instance is not re-exported here.

__all__ = []
