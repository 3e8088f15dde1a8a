"""Workspace-relative path rendering for tool-use entries."""

from __future__ import annotations

import logging
from pathlib import Path

logger = logging.getLogger(__name__)


def make_path_relative(path: str, working_directory: str) -> str:
    """Render *path* relative to *working_directory* when possible.

    Relative paths pass through. Absolute paths are stripped of the
    working directory prefix, first literally and then after resolving
    symlinks on both sides. When neither works (including paths that do
    not exist), the original string is returned untouched.
    """
    candidate = Path(path)
    if not candidate.is_absolute():
        return path

    root = Path(working_directory)
    try:
        return _as_text(candidate.relative_to(root))
    except ValueError:
        pass

    try:
        canonical_path = candidate.resolve(strict=True)
        canonical_root = root.resolve(strict=True)
    except (OSError, RuntimeError):
        logger.debug(
            "Could not canonicalize %s or %s; keeping original path",
            path, working_directory,
        )
        return path

    try:
        return _as_text(canonical_path.relative_to(canonical_root))
    except ValueError:
        logger.debug(
            "%s is outside %s after canonicalization; keeping original path",
            canonical_path, canonical_root,
        )
        return path


def _as_text(relative: Path) -> str:
    text = str(relative)
    return "" if text == "." else text
