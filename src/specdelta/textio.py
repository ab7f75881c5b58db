"""
textio.py - Text source and sink for specification documents

The engine itself only transforms strings. These helpers are the thin
file-system layer the applier and the CLI use to read baselines and
deltas and to write merged output. All text is UTF-8.
"""

from __future__ import annotations
import logging
from pathlib import Path
from typing import Optional, Union

from .errors import OutputWriteError, SourceNotFoundError, SourceReadError

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def read_optional_text(path: PathLike) -> Optional[str]:
    """Return the file's text, or None if it does not exist."""
    p = Path(path)
    if not p.exists():
        logger.debug("optional document not found: %s", p)
        return None
    return read_required_text(p)


def read_required_text(path: PathLike, what: str = "document") -> str:
    """Return the file's text.

    Raises:
        SourceNotFoundError: The file does not exist.
        SourceReadError: The file exists but cannot be read or decoded.
    """
    p = Path(path)
    if not p.exists():
        raise SourceNotFoundError(f"{what} not found at {p}")
    try:
        return p.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise SourceReadError(f"{what} at {p}: {e}") from e


def write_text(path: PathLike, text: str) -> Path:
    """Write text to path, creating parent directories and overwriting.

    Raises:
        OutputWriteError: The directory or file could not be written.
    """
    p = Path(path)
    try:
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(text, encoding="utf-8")
    except OSError as e:
        raise OutputWriteError(f"{p}: {e}") from e
    logger.info("wrote %d characters to %s", len(text), p)
    return p
