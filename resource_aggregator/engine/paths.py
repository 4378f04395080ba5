from __future__ import annotations

from pathlib import Path
from typing import Tuple

AGGREGATED_FILE_EXTENSION = ".aggr"


def split_extension(path: str | Path) -> Tuple[Path, str]:
    """
    Split ``path`` into the path without its extension and the extension itself.

    Only the final component is inspected. A name without a dot, or a hidden
    name whose only dot is the leading one, has no extension. A trailing dot
    is an empty extension and is dropped from the stem.
    """
    path = Path(path)
    name = path.name
    index = name.rfind(".")
    if index <= 0:
        return path, ""

    extension = name[index:]
    stem_path = path.with_name(name[:index])
    if extension == ".":
        return stem_path, ""
    return stem_path, extension


def remove_extension(path: str | Path) -> Path:
    stem_path, _ = split_extension(path)
    return stem_path


def path_with_suffix(path: str | Path, suffix: str) -> Path:
    """Insert ``suffix`` before the extension, e.g. ``app.js`` -> ``app.min.js``."""
    stem_path, extension = split_extension(path)
    return stem_path.with_name(f"{stem_path.name}{suffix}{extension}")


def aggregated_path(path: str | Path) -> Path:
    stem_path = remove_extension(Path(path).resolve())
    return stem_path.with_name(stem_path.name + AGGREGATED_FILE_EXTENSION)
