"""Resolve local file paths into the base-name keyed file set sent to Crowdin."""

from pathlib import Path
from typing import Iterable

FILE_LIST_SEPARATOR = ";"

FileSet = dict[str, Path]


def split_file_list(value: str) -> list[str]:
    """Split a ``;`` separated file list from configuration.

    Segments are returned as-is, empty ones included.
    """
    return value.split(FILE_LIST_SEPARATOR)


def build_file_set(paths: Iterable[str]) -> FileSet:
    """Map each path's base name to the path.

    Paths sharing a base name collapse to a single entry; the last one wins.

    Args:
        paths: Local file paths, relative or absolute.

    Returns:
        Dictionary mapping base name to local path.
    """
    file_set: FileSet = {}
    for path in paths:
        local = Path(path)
        file_set[local.name] = local
    return file_set
