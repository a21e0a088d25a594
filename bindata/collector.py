"""Input directory traversal producing the asset table of contents."""

from __future__ import annotations

import os
import re
from typing import Iterator, List, Sequence

from .errors import AssetNameError, CollectError
from .identifiers import safe_function_name
from .logging import get_logger
from .models import Asset, TableOfContents

_LOGGER = get_logger("collector")


def _to_slash(path: str) -> str:
    if os.sep != "/":
        path = path.replace(os.sep, "/")
    return path


def _is_ignored(path: str, ignore: Sequence[re.Pattern[str]]) -> bool:
    absolute = os.path.abspath(path)
    return any(pattern.search(absolute) for pattern in ignore)


def _list_dir(directory: str) -> List[os.DirEntry[str]]:
    try:
        with os.scandir(directory) as entries:
            return list(entries)
    except OSError as exc:
        raise CollectError(f"Failed to read directory {directory}: {exc}") from exc


def _asset_name(path: str, prefix: str) -> str:
    name = _to_slash(path)
    if name.startswith(prefix):
        name = name[len(prefix):]
    if name.startswith("/"):
        name = name[1:]
    return name


def find_files(
    root: str,
    prefix: str,
    recursive: bool,
    ignore: Sequence[re.Pattern[str]] = (),
) -> TableOfContents:
    """Walk ``root`` and return its assets in directory listing order.

    Ignored entries are neither collected nor descended into, and hidden
    directories are always skipped. Any listing failure or an asset whose
    name becomes empty once ``prefix`` is stripped aborts the whole walk.
    """
    if prefix:
        root = os.path.abspath(root)
        prefix = _to_slash(os.path.abspath(prefix))

    toc: TableOfContents = []
    # One listing iterator per open directory keeps subdirectory contents at
    # the position the subdirectory occupies in its parent's listing.
    pending: List[Iterator[os.DirEntry[str]]] = [iter(_list_dir(root))]
    while pending:
        entry = next(pending[-1], None)
        if entry is None:
            pending.pop()
            continue

        path = entry.path
        if _is_ignored(path, ignore):
            continue
        if entry.is_dir(follow_symlinks=False):
            if recursive and not entry.name.startswith("."):
                pending.append(iter(_list_dir(path)))
            continue

        name = _asset_name(path, prefix)
        if not name:
            raise AssetNameError(f"Invalid file: {path}")
        toc.append(Asset(path=os.path.abspath(path), name=name, func=safe_function_name(name)))

    _LOGGER.debug("Collected %d assets from %s", len(toc), root)
    return toc


class FileCollector:
    """Collects assets for a single input root."""

    def collect(
        self,
        root: str,
        prefix: str,
        recursive: bool,
        ignore: Sequence[re.Pattern[str]] = (),
    ) -> TableOfContents:
        return find_files(root, prefix, recursive, ignore)


__all__ = ["FileCollector", "find_files"]
