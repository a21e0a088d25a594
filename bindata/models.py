"""Core data models shared across bindata components."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import List, Optional

DEFAULT_PACKAGE = "main"
DEFAULT_OUTPUT = "./bindata.py"


@dataclass(frozen=True)
class Asset:
    """A single input file scheduled for embedding."""

    path: str
    name: str
    func: str


TableOfContents = List[Asset]


@dataclass
class InputConfig:
    """One traversal root within a job."""

    path: str
    recursive: bool = False


@dataclass
class JobConfig:
    """Complete description of one generated output module."""

    package: str = DEFAULT_PACKAGE
    inputs: List[InputConfig] = field(default_factory=list)
    output: str = DEFAULT_OUTPUT
    prefix: str = ""
    ignore: List[re.Pattern[str]] = field(default_factory=list)
    tags: str = ""
    debug: bool = False
    no_memcopy: bool = False
    no_compress: bool = False
    fmt: bool = False


@dataclass
class JobReport:
    """Outcome of one job executed as part of a batch."""

    job: JobConfig
    elapsed: float
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None


__all__ = [
    "Asset",
    "DEFAULT_OUTPUT",
    "DEFAULT_PACKAGE",
    "InputConfig",
    "JobConfig",
    "JobReport",
    "TableOfContents",
]
