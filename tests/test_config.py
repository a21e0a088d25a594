"""Tests for bindata.config."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from bindata.config import (
    BindataConfig,
    ConfigError,
    compile_ignore_patterns,
    job_from_config,
    load_config,
    validate_job,
)
from bindata.models import InputConfig, JobConfig


def test_load_config_returns_defaults_when_missing(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert isinstance(config, BindataConfig)
    assert config.root == tmp_path.resolve()
    assert config.package is None
    assert config.ignore == []
    assert config.formatter == ["black", "-q"]
    assert config.workspace.asset_dir == "assets"
    assert config.workspace.code_dir == "code"
    assert config.workspace.output_name == "bindata.py"
    assert config.debug is False


def test_load_config_parses_expected_fields(tmp_path: Path) -> None:
    config_file = tmp_path / ".bindata.yml"
    config_file.write_text(
        """
package: webassets
prefix: "static/"
tags: "release"
output: "build/assets.py"
debug: false
nomemcopy: "yes"
nocompress: true
fmt: true
formatter: "ruff format"
ignore:
  - "\\\\.map$"
  - "/drafts/"
workspace:
  asset_dir: data
  code_dir: src
  output_name: embedded.py
  paths: [/srv/one, /srv/two]
""",
        encoding="utf-8",
    )

    config = load_config(config_file)

    assert config.package == "webassets"
    assert config.prefix == "static/"
    assert config.tags == "release"
    assert config.output == "build/assets.py"
    assert config.debug is False
    assert config.no_memcopy is True
    assert config.no_compress is True
    assert config.fmt is True
    assert config.formatter == ["ruff", "format"]
    assert config.ignore == ["\\.map$", "/drafts/"]
    assert config.workspace.asset_dir == "data"
    assert config.workspace.code_dir == "src"
    assert config.workspace.output_name == "embedded.py"
    assert config.workspace.paths == ["/srv/one", "/srv/two"]


def test_load_config_accepts_formatter_list(tmp_path: Path) -> None:
    (tmp_path / ".bindata.yml").write_text("formatter: [black, \"--fast\"]\n", encoding="utf-8")

    assert load_config(tmp_path).formatter == ["black", "--fast"]


def test_load_config_treats_empty_file_as_defaults(tmp_path: Path) -> None:
    (tmp_path / ".bindata.yml").write_text("\n# nothing here\n", encoding="utf-8")

    config = load_config(tmp_path)

    assert config.package is None
    assert config.fmt is False


def test_load_config_rejects_non_mapping(tmp_path: Path) -> None:
    (tmp_path / ".bindata.yml").write_text("- just\n- a list\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(tmp_path)


@pytest.mark.parametrize("line", ["package: true", "package: 42", "prefix: 12", "prefix: [a, b]"])
def test_load_config_rejects_non_string_names(tmp_path: Path, line: str) -> None:
    (tmp_path / ".bindata.yml").write_text(line + "\n", encoding="utf-8")

    with pytest.raises(ConfigError) as excinfo:
        load_config(tmp_path)

    assert "must be a string" in str(excinfo.value)


def test_load_config_accepts_quoted_scalar_package(tmp_path: Path) -> None:
    (tmp_path / ".bindata.yml").write_text("package: \"web\"\nprefix: \"12\"\n", encoding="utf-8")

    config = load_config(tmp_path)

    assert (config.package, config.prefix) == ("web", "12")


def test_load_config_rejects_invalid_yaml(tmp_path: Path) -> None:
    (tmp_path / ".bindata.yml").write_text("package: [unterminated\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_compile_ignore_patterns_reports_invalid_expression() -> None:
    assert [pattern.pattern for pattern in compile_ignore_patterns(["a+", "b$"])] == ["a+", "b$"]
    with pytest.raises(ConfigError):
        compile_ignore_patterns(["(unclosed"])


def test_job_from_config_applies_defaults(tmp_path: Path) -> None:
    config = BindataConfig(root=tmp_path, tags="dev", ignore=["\\.tmp$"], no_compress=True)

    job = job_from_config(config)

    assert job.package == "main"
    assert job.output == "./bindata.py"
    assert job.tags == "dev"
    assert job.no_compress is True
    assert job.ignore[0].search("/x/file.tmp")


def _input(tmp_path: Path) -> InputConfig:
    source = tmp_path / "src"
    source.mkdir(exist_ok=True)
    return InputConfig(path=str(source))


def test_validate_job_requires_package(tmp_path: Path) -> None:
    job = JobConfig(package="", inputs=[_input(tmp_path)], output=str(tmp_path / "out.py"))

    with pytest.raises(ConfigError, match="Missing package name"):
        validate_job(job)


def test_validate_job_requires_identifier_package(tmp_path: Path) -> None:
    job = JobConfig(package="my-pkg", inputs=[_input(tmp_path)], output=str(tmp_path / "out.py"))

    with pytest.raises(ConfigError):
        validate_job(job)


def test_validate_job_requires_inputs(tmp_path: Path) -> None:
    with pytest.raises(ConfigError):
        validate_job(JobConfig(output=str(tmp_path / "out.py")))


def test_validate_job_rejects_missing_input(tmp_path: Path) -> None:
    job = JobConfig(inputs=[InputConfig(path=str(tmp_path / "nope"))], output=str(tmp_path / "out.py"))

    with pytest.raises(ConfigError, match="Failed to stat input path"):
        validate_job(job)


def test_validate_job_rejects_directory_output(tmp_path: Path) -> None:
    job = JobConfig(inputs=[_input(tmp_path)], output=str(tmp_path))

    with pytest.raises(ConfigError, match="directory"):
        validate_job(job)


def test_validate_job_creates_output_directory(tmp_path: Path) -> None:
    output = tmp_path / "gen" / "deep" / "bindata.py"
    job = JobConfig(inputs=[_input(tmp_path)], output=str(output))

    validate_job(job)

    assert output.parent.is_dir()
    assert not output.exists()


def test_validate_job_defaults_output_to_working_directory(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.chdir(tmp_path)
    job = JobConfig(inputs=[_input(tmp_path)], output="")

    validate_job(job)

    assert job.output == os.path.join(os.getcwd(), "bindata.py")
