"""Configuration loading (.bindata.yml) and job validation."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence

import yaml

from .errors import ConfigError
from .models import DEFAULT_PACKAGE, JobConfig

CONFIG_FILENAME = ".bindata.yml"
DEFAULT_OUTPUT_NAME = "bindata.py"
DEFAULT_FORMATTER = ("black", "-q")
WORKSPACE_ENV = "BINDATA_PATH"


@dataclass
class WorkspaceConfig:
    """Layout used when matching asset and code trees automatically."""

    asset_dir: str = "assets"
    code_dir: str = "code"
    output_name: str = DEFAULT_OUTPUT_NAME
    paths: List[str] = field(default_factory=list)


@dataclass
class BindataConfig:
    """Represents the defaults defined in .bindata.yml."""

    root: Path
    package: Optional[str] = None
    prefix: Optional[str] = None
    tags: Optional[str] = None
    output: Optional[str] = None
    debug: bool = False
    no_memcopy: bool = False
    no_compress: bool = False
    fmt: bool = False
    ignore: List[str] = field(default_factory=list)
    formatter: List[str] = field(default_factory=lambda: list(DEFAULT_FORMATTER))
    workspace: WorkspaceConfig = field(default_factory=WorkspaceConfig)


def load_config(config_path: Path) -> BindataConfig:
    """Load configuration from disk, returning defaults when the file is absent."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return BindataConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    workspace = WorkspaceConfig()
    workspace_data = _as_dict(data.get("workspace"))
    if workspace_data:
        workspace.asset_dir = _as_str(workspace_data.get("asset_dir")) or workspace.asset_dir
        workspace.code_dir = _as_str(workspace_data.get("code_dir")) or workspace.code_dir
        workspace.output_name = _as_str(workspace_data.get("output_name")) or workspace.output_name
        workspace.paths = _as_str_list(workspace_data.get("paths"))

    formatter = _as_str_list(data.get("formatter"))
    if len(formatter) == 1:
        formatter = formatter[0].split()

    return BindataConfig(
        root=root,
        package=_as_text(data, "package"),
        prefix=_as_text(data, "prefix"),
        tags=_as_str(data.get("tags")),
        output=_as_str(data.get("output")),
        debug=_as_bool(data.get("debug")) or False,
        no_memcopy=_as_bool(data.get("nomemcopy")) or False,
        no_compress=_as_bool(data.get("nocompress")) or False,
        fmt=_as_bool(data.get("fmt")) or False,
        ignore=_as_str_list(data.get("ignore")),
        formatter=formatter or list(DEFAULT_FORMATTER),
        workspace=workspace,
    )


def compile_ignore_patterns(patterns: Iterable[str]) -> List[re.Pattern[str]]:
    """Compile ignore expressions, reporting the first invalid one."""
    compiled: List[re.Pattern[str]] = []
    for pattern in patterns:
        try:
            compiled.append(re.compile(pattern))
        except re.error as exc:
            raise ConfigError(f"Invalid ignore pattern {pattern!r}: {exc}") from exc
    return compiled


def validate_job(job: JobConfig) -> None:
    """Check a job before any collection happens, filling in a default output.

    The output directory is created when missing so the emitter can write
    straight into it.
    """
    if not job.package:
        raise ConfigError("Missing package name")
    if not job.package.isidentifier():
        raise ConfigError(f"Package name is not a valid identifier: {job.package}")
    if not job.inputs:
        raise ConfigError("No input paths specified")

    for input_config in job.inputs:
        try:
            os.lstat(input_config.path)
        except OSError as exc:
            raise ConfigError(f"Failed to stat input path '{input_config.path}': {exc}") from exc

    if not job.output:
        job.output = os.path.join(os.getcwd(), DEFAULT_OUTPUT_NAME)

    try:
        stat_result: Optional[os.stat_result] = os.lstat(job.output)
    except FileNotFoundError:
        stat_result = None
    except OSError as exc:
        raise ConfigError(f"Output path: {exc}") from exc

    if stat_result is None:
        directory = os.path.dirname(job.output)
        if directory:
            try:
                os.makedirs(directory, exist_ok=True)
            except OSError as exc:
                raise ConfigError(f"Create output directory: {exc}") from exc
    elif os.path.isdir(job.output):
        raise ConfigError(f"Output path is a directory: {job.output}")


def job_from_config(config: BindataConfig) -> JobConfig:
    """Build a job template carrying the configuration file's defaults."""
    job = JobConfig(
        package=config.package or DEFAULT_PACKAGE,
        prefix=config.prefix or "",
        tags=config.tags or "",
        ignore=compile_ignore_patterns(config.ignore),
        debug=config.debug,
        no_memcopy=config.no_memcopy,
        no_compress=config.no_compress,
        fmt=config.fmt,
    )
    if config.output:
        job.output = config.output
    return job


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Any:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return {} if loaded is None else loaded


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_text(data: Dict[str, Any], key: str) -> Optional[str]:
    # Unquoted YAML scalars such as `true` or `12` are not names.
    value = data.get(key)
    if value is None or isinstance(value, str):
        return value
    raise ConfigError(f"{key} must be a string, got {type(value).__name__}: {value!r}")


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []


__all__ = [
    "BindataConfig",
    "CONFIG_FILENAME",
    "DEFAULT_FORMATTER",
    "DEFAULT_OUTPUT_NAME",
    "WORKSPACE_ENV",
    "WorkspaceConfig",
    "compile_ignore_patterns",
    "job_from_config",
    "load_config",
    "validate_job",
]
