"""Renders a table of contents into an importable Python module."""

from __future__ import annotations

import gzip
from dataclasses import dataclass
from pathlib import Path
from typing import List

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from .logging import get_logger
from .models import Asset, JobConfig, TableOfContents

_TEMPLATE_NAME = "module.py.j2"


@dataclass
class _RenderedAsset:
    name: str
    func: str
    path: str
    expression: str
    chunks: List[str]


class PythonEmitter:
    """Writes the generated module for a job.

    Release builds embed the file bytes, gzip-compressed unless the job asks
    otherwise. Debug builds keep only the source paths and read the files
    whenever an asset is requested.
    """

    def __init__(self, templates_dir: Path | None = None, *, chunk_size: int = 64) -> None:
        self.templates_dir = templates_dir or Path(__file__).with_name("templates")
        self.chunk_size = chunk_size
        self.logger = get_logger("emitter")
        self._env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=False,
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
            undefined=StrictUndefined,
        )
        self._env.filters["pyrepr"] = repr

    def emit(self, job: JobConfig, toc: TableOfContents) -> None:
        """Render ``toc`` and write it to ``job.output``."""
        source = self.render(job, toc)
        with open(job.output, "w", encoding="utf-8", newline="\n") as handle:
            handle.write(source)
        self.logger.debug("Wrote %d assets to %s", len(toc), job.output)

    def render(self, job: JobConfig, toc: TableOfContents) -> str:
        compress = not job.debug and not job.no_compress
        template = self._env.get_template(_TEMPLATE_NAME)
        return template.render(
            package=job.package,
            tags=" ".join(job.tags.split()),
            imports=["gzip"] if compress and toc else [],
            debug=job.debug,
            assets=[self._render_asset(job, asset, compress) for asset in toc],
        )

    def _render_asset(self, job: JobConfig, asset: Asset, compress: bool) -> _RenderedAsset:
        if job.debug:
            expression = "handle.read()"
            chunks: List[str] = []
        else:
            data = Path(asset.path).read_bytes()
            if compress:
                data = gzip.compress(data, mtime=0)
                expression = f"gzip.decompress(_data_{asset.func})"
            else:
                expression = f"_data_{asset.func}"
            chunks = self._chunk(data)
        if job.no_memcopy:
            expression = f"memoryview({expression})"
        return _RenderedAsset(
            name=asset.name,
            func=asset.func,
            path=asset.path,
            expression=expression,
            chunks=chunks,
        )

    def _chunk(self, data: bytes) -> List[str]:
        if not data:
            return [repr(b"")]
        return [
            repr(data[offset : offset + self.chunk_size])
            for offset in range(0, len(data), self.chunk_size)
        ]


__all__ = ["PythonEmitter"]
