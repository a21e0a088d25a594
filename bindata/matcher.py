"""Discovery of asset/code directory pairings across workspace roots.

Every workspace root holds two parallel trees, an asset tree and a code
tree. For this layout::

    .
    ├── assets
    │   └── example
    │       ├── css
    │       └── js
    └── code
        └── example

the matcher yields a single job reading ``assets/example`` recursively,
stripping it as the name prefix, and writing ``code/example/bindata.py``.
Only directory listings are consulted; file contents are never read.
"""

from __future__ import annotations

import os
from collections import Counter
from typing import List, Optional

from .config import DEFAULT_OUTPUT_NAME
from .errors import NoMatchingRootsError
from .identifiers import safe_function_name
from .logging import get_logger
from .models import InputConfig, JobConfig

_VCS_DIRS = frozenset({".git", ".hg", ".svn", ".bzr", "CVS", "_darcs"})


def _list_subdirs(path: str) -> Optional[List[str]]:
    """Return visible subdirectory names of ``path``, or None when unreadable."""
    try:
        with os.scandir(path) as entries:
            return [
                entry.name
                for entry in entries
                if entry.is_dir()
                and entry.name not in _VCS_DIRS
                and not entry.name.startswith(".")
            ]
    except OSError:
        return None


def count_entries(path: str) -> int:
    """Number of entries directly inside ``path``; 0 when it cannot be listed."""
    try:
        return len(os.listdir(path))
    except OSError:
        return 0


def intersect(asset_root: str, code_root: str) -> List[str]:
    """Return relative directories eligible for generation.

    A directory present on both sides is explored further; exploration stops
    at a leaf (no visible subdirectories, or an unreadable side) and that
    path becomes a candidate. Directories found only on the asset side are
    candidates too, except directly under the roots.
    """
    candidates: List[str] = []
    pending: List[str] = [""]
    while pending:
        rel = pending.pop()
        asset_dirs = _list_subdirs(os.path.join(asset_root, rel))
        code_dirs = _list_subdirs(os.path.join(code_root, rel))
        if not asset_dirs or not code_dirs:
            # The roots themselves are never a pairing.
            if rel:
                candidates.append(rel)
            continue

        counts = Counter(asset_dirs)
        counts.update(code_dirs)
        code_names = set(code_dirs)
        for name in asset_dirs:
            child = os.path.join(rel, name) if rel else name
            if counts[name] > 1:
                pending.append(child)
            elif rel and name not in code_names:
                candidates.append(child)
    return candidates


class WorkspaceMatcher:
    """Builds one job per asset/code pairing found under the workspace roots."""

    def __init__(
        self,
        asset_dir: str = "assets",
        code_dir: str = "code",
        output_name: str = DEFAULT_OUTPUT_NAME,
    ) -> None:
        self.asset_dir = asset_dir
        self.code_dir = code_dir
        self.output_name = output_name
        self.logger = get_logger("matcher")

    def glob(self, path_list: str) -> List[JobConfig]:
        """Match every root in an ``os.pathsep`` separated list.

        Raises NoMatchingRootsError when no root yields a usable pairing.
        """
        roots = [path for path in path_list.split(os.pathsep) if path]
        jobs: List[JobConfig] = []
        for root in roots:
            jobs.extend(self.match_root(root))
        if not jobs:
            raise NoMatchingRootsError(
                f"No matching {self.asset_dir}/{self.code_dir} directories found "
                "or no workspace roots provided"
            )
        return jobs

    def match_root(self, root: str) -> List[JobConfig]:
        asset_root = os.path.join(root, self.asset_dir)
        code_root = os.path.join(root, self.code_dir)
        jobs: List[JobConfig] = []
        for rel in intersect(asset_root, code_root):
            input_path = os.path.abspath(os.path.join(asset_root, rel))
            if count_entries(input_path) == 0:
                self.logger.debug("Skipping empty asset directory %s", input_path)
                continue
            jobs.append(
                JobConfig(
                    package=safe_function_name(os.path.basename(rel)),
                    inputs=[InputConfig(path=input_path, recursive=True)],
                    output=os.path.abspath(os.path.join(code_root, rel, self.output_name)),
                    prefix=input_path,
                )
            )
        self.logger.debug("Matched %d pairings under %s", len(jobs), root)
        return jobs


__all__ = ["WorkspaceMatcher", "count_entries", "intersect"]
