"""
Extension discovery.

Extensions come from two places, in this order:
1. The "kitebuilder.extensions" entry-point group of installed packages
2. <root>/extensions/*.py, sorted by filename

Only Extension subclasses are taken. From a file, only classes defined in that
file count, so importing a base class from elsewhere does not register it twice.
"""

import inspect
import logging
from importlib.metadata import entry_points
from pathlib import Path

from kitebuilder.extension import Extension
from kitebuilder.utils import load_module

logger = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "kitebuilder.extensions"
EXTENSIONS_DIR = "extensions"


def discover_entry_points() -> list[type[Extension]]:
    """Extension classes registered by installed packages."""
    found = []
    for ep in entry_points().select(group=ENTRY_POINT_GROUP):
        extension = ep.load()
        if not (inspect.isclass(extension) and issubclass(extension, Extension)):
            raise TypeError(
                f"Entry point {ep.name} ({ep.value}) is not an Extension subclass"
            )
        found.append(extension)
    return found


def discover_files(root: Path | str) -> list[type[Extension]]:
    """Extension classes defined in <root>/extensions/*.py."""
    extensions_dir = Path(root) / EXTENSIONS_DIR
    if not extensions_dir.is_dir():
        return []

    found = []
    for path in sorted(extensions_dir.glob("*.py")):
        module = load_module(path)
        for _, obj in inspect.getmembers(module, inspect.isclass):
            if issubclass(obj, Extension) and obj is not Extension and obj.__module__ == module.__name__:
                found.append(obj)
    return found


def load(root: Path | str) -> list[type[Extension]]:
    """
    Discover all extensions for a pipeline root.

    Args:
        root: Pipeline root directory

    Returns:
        Extension classes, entry points first, then files
    """
    extensions = discover_entry_points() + discover_files(root)
    for extension in extensions:
        logger.debug(f"Discovered extension: {extension.__module__}.{extension.__qualname__}")
    return extensions
