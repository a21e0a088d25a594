"""Exception hierarchy for bindata runs."""

from __future__ import annotations


class BindataError(RuntimeError):
    """Base class for every error raised by bindata."""


class ConfigError(BindataError):
    """Raised when a job or configuration file is invalid."""


class CollectError(BindataError):
    """Raised when an input directory cannot be opened or listed."""


class AssetNameError(BindataError):
    """Raised when a collected file resolves to an unusable asset name."""


class DuplicateAssetError(AssetNameError):
    """Raised when two assets share a name or an identifier within one job."""


class NoMatchingRootsError(BindataError):
    """Raised when workspace matching finds no asset/code pairing."""


class FormatterError(BindataError):
    """Raised when the external formatter cannot be run or fails."""


__all__ = [
    "AssetNameError",
    "BindataError",
    "CollectError",
    "ConfigError",
    "DuplicateAssetError",
    "FormatterError",
    "NoMatchingRootsError",
]
