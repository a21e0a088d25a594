"""CLI entrypoint for bindata."""

from __future__ import annotations

import argparse
import dataclasses
import os
import sys
from pathlib import Path
from typing import List, Optional

from . import __version__
from .config import (
    WORKSPACE_ENV,
    BindataConfig,
    compile_ignore_patterns,
    job_from_config,
    load_config,
)
from .errors import BindataError
from .formatter import Formatter
from .logging import configure_logging, get_logger
from .matcher import WorkspaceMatcher
from .models import InputConfig, JobConfig
from .orchestrator import Generator

_RECURSIVE_SUFFIX = "/..."

_LOGGER = get_logger("cli")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bindata",
        description=(
            "Embed static asset directories into generated Python modules. "
            "Without inputs, asset/code trees are matched across the workspace roots."
        ),
    )
    parser.add_argument(
        "inputs",
        nargs="*",
        help="Input directories. Append /... to include subdirectories.",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=None,
        help="Do not embed the assets; the generated module reads them from disk.",
    )
    parser.add_argument("--tags", default=None, help="Optional tags recorded in the module header.")
    parser.add_argument("--prefix", default=None, help="Optional path prefix to strip off asset names.")
    parser.add_argument("--pkg", dest="package", default=None, help="Package name recorded in the generated module.")
    parser.add_argument(
        "--nomemcopy",
        action="store_true",
        default=None,
        help="Return memoryview objects instead of bytes from asset accessors.",
    )
    parser.add_argument(
        "--nocompress",
        action="store_true",
        default=None,
        help="Assets will not be gzip compressed.",
    )
    parser.add_argument("-o", "--output", default=None, help="Output file to generate.")
    parser.add_argument(
        "--ignore",
        action="append",
        default=[],
        help="Regex pattern to ignore (may be repeated).",
    )
    parser.add_argument(
        "--fmt",
        action="store_true",
        default=None,
        help="Run the configured formatter on every generated module.",
    )
    parser.add_argument(
        "--config",
        default=".",
        help="Path to .bindata.yml or the directory containing it.",
    )
    parser.add_argument(
        "--workspace",
        default=None,
        help=f"Workspace roots separated by {os.pathsep!r} (defaults to ${WORKSPACE_ENV}).",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Increase log verbosity for troubleshooting.",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also append log records, including per-job ok/fail lines, to this file.",
    )
    return parser


def parse_input(path: str) -> InputConfig:
    """Split the recursive marker off an input argument.

    ``assets/...`` becomes a recursive input for ``assets``; any other path is
    read without descending into subdirectories.
    """
    if path.endswith(_RECURSIVE_SUFFIX):
        return InputConfig(path=os.path.normpath(path[: -len(_RECURSIVE_SUFFIX)]), recursive=True)
    return InputConfig(path=os.path.normpath(path), recursive=False)


def _build_job(args: argparse.Namespace, config: BindataConfig) -> JobConfig:
    job = job_from_config(config)
    if args.package is not None:
        job.package = args.package
    if args.prefix is not None:
        job.prefix = args.prefix
    if args.tags is not None:
        job.tags = args.tags
    if args.output is not None:
        job.output = args.output
    if args.debug:
        job.debug = True
    if args.nomemcopy:
        job.no_memcopy = True
    if args.nocompress:
        job.no_compress = True
    if args.fmt:
        job.fmt = True
    job.ignore = job.ignore + compile_ignore_patterns(args.ignore)
    job.inputs = [parse_input(path) for path in args.inputs]
    return job


def _workspace_paths(args: argparse.Namespace, config: BindataConfig) -> str:
    if args.workspace:
        return args.workspace
    env_value = os.environ.get(WORKSPACE_ENV)
    if env_value:
        return env_value
    if config.workspace.paths:
        return os.pathsep.join(config.workspace.paths)
    return os.getcwd()


def copy_shared_options(dst: JobConfig, src: JobConfig) -> JobConfig:
    """Return ``dst`` with the options shared by every discovered job taken from ``src``."""
    return dataclasses.replace(
        dst,
        tags=src.tags,
        no_memcopy=src.no_memcopy,
        no_compress=src.no_compress,
        debug=src.debug,
        ignore=list(src.ignore),
        fmt=src.fmt,
    )


def _report(job: JobConfig, elapsed: float, error: Optional[BaseException]) -> None:
    source = job.inputs[0].path if job.inputs else job.prefix
    if error is not None:
        _LOGGER.error("fail\t%s\t(%s)\t%.3fs\n\terror: %s", source, job.output, elapsed, error)
    else:
        _LOGGER.info("ok\t%s\t(%s)\t%.3fs", source, job.output, elapsed)


def main(argv: List[str] | None = None) -> None:
    """CLI entrypoint for bindata."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)

    try:
        config = load_config(Path(args.config))
        template = _build_job(args, config)
    except BindataError as exc:
        parser.exit(1, f"bindata: {exc}\n")

    generator = Generator(formatter=Formatter(config.formatter))

    if not template.inputs:
        matcher = WorkspaceMatcher(
            asset_dir=config.workspace.asset_dir,
            code_dir=config.workspace.code_dir,
            output_name=config.workspace.output_name,
        )
        try:
            jobs = matcher.glob(_workspace_paths(args, config))
        except BindataError as exc:
            parser.exit(1, f"bindata: {exc}\n")
        jobs = [copy_shared_options(job, template) for job in jobs]
        if not generator.generate_all(jobs, _report):
            sys.exit(1)
        return

    try:
        generator.generate(template)
    except (BindataError, OSError) as exc:
        parser.exit(1, f"bindata: {exc}\n")


if __name__ == "__main__":
    main(sys.argv[1:])
