"""Embed static asset trees into generated Python modules."""

from .collector import FileCollector, find_files
from .errors import (
    AssetNameError,
    BindataError,
    CollectError,
    ConfigError,
    DuplicateAssetError,
    FormatterError,
    NoMatchingRootsError,
)
from .identifiers import safe_function_name
from .matcher import WorkspaceMatcher
from .models import Asset, InputConfig, JobConfig, JobReport
from .orchestrator import Generator

__version__ = "0.1.0"

__all__ = [
    "Asset",
    "AssetNameError",
    "BindataError",
    "CollectError",
    "ConfigError",
    "DuplicateAssetError",
    "FileCollector",
    "FormatterError",
    "Generator",
    "InputConfig",
    "JobConfig",
    "JobReport",
    "NoMatchingRootsError",
    "WorkspaceMatcher",
    "__version__",
    "safe_function_name",
]
