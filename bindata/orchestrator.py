"""Job execution for single outputs and concurrent batches."""

from __future__ import annotations

import os
import queue
import threading
import time
from typing import Callable, Dict, List, Optional, Sequence, Tuple, cast

from .collector import FileCollector
from .config import validate_job
from .emitter import PythonEmitter
from .errors import DuplicateAssetError
from .formatter import Formatter
from .logging import get_logger
from .models import JobConfig, JobReport, TableOfContents

Observer = Callable[[JobConfig, float, Optional[BaseException]], None]

_CLOSED = object()


def available_parallelism() -> int:
    """Number of CPUs this process may run on."""
    if hasattr(os, "sched_getaffinity"):
        return len(os.sched_getaffinity(0)) or 1
    return os.cpu_count() or 1


class Generator:
    """Coordinates collection, emission and formatting for one run."""

    def __init__(
        self,
        collector: FileCollector | None = None,
        emitter: PythonEmitter | None = None,
        formatter: Formatter | None = None,
        max_workers: int | None = None,
    ) -> None:
        self.collector = collector or FileCollector()
        self.emitter = emitter or PythonEmitter()
        self.formatter = formatter or Formatter()
        self.max_workers = max_workers
        self.logger = get_logger("orchestrator")

    def translate(self, job: JobConfig) -> TableOfContents:
        """Collect every input of ``job`` and write its module."""
        validate_job(job)

        toc: TableOfContents = []
        for input_config in job.inputs:
            toc.extend(
                self.collector.collect(
                    input_config.path,
                    job.prefix,
                    input_config.recursive,
                    job.ignore,
                )
            )
        _check_unique(toc)

        self.logger.debug("Emitting %d assets for package %s", len(toc), job.package)
        self.emitter.emit(job, toc)
        return toc

    def generate(self, job: JobConfig) -> TableOfContents:
        """Translate ``job`` and run the formatter when the job requests it."""
        toc = self.translate(job)
        if job.fmt:
            self.formatter.format(job.output)
        return toc

    def generate_all(self, jobs: Sequence[JobConfig], observer: Observer | None = None) -> bool:
        """Run every job on a bounded worker pool.

        The observer is called exactly once per job, possibly from several
        worker threads at once. Returns True only if every job succeeded.
        """
        reports = self.run_batch(jobs, observer)
        return all(report.ok for report in reports)

    def run_batch(
        self, jobs: Sequence[JobConfig], observer: Observer | None = None
    ) -> List[JobReport]:
        if not jobs:
            return []

        workers = min(self.max_workers or available_parallelism(), len(jobs))
        pending: "queue.Queue[object]" = queue.Queue()
        for index, job in enumerate(jobs):
            pending.put((index, job))
        for _ in range(workers):
            pending.put(_CLOSED)

        reports: List[Optional[JobReport]] = [None] * len(jobs)

        def _worker() -> None:
            while True:
                item = pending.get()
                if item is _CLOSED:
                    return
                index, job = cast(Tuple[int, JobConfig], item)
                report = self._run_one(job)
                reports[index] = report
                self._notify(observer, report)

        threads = [
            threading.Thread(target=_worker, name=f"bindata-worker-{index}", daemon=True)
            for index in range(workers)
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        return [report for report in reports if report is not None]

    def _run_one(self, job: JobConfig) -> JobReport:
        begin = time.perf_counter()
        error: Optional[BaseException] = None
        try:
            self.generate(job)
        except Exception as exc:
            error = exc
        return JobReport(job=job, elapsed=time.perf_counter() - begin, error=error)

    def _notify(self, observer: Observer | None, report: JobReport) -> None:
        if observer is None:
            return
        try:
            observer(report.job, report.elapsed, report.error)
        except Exception:
            self.logger.exception("Observer failed for %s", report.job.output)


def _check_unique(toc: TableOfContents) -> None:
    names: Dict[str, str] = {}
    funcs: Dict[str, str] = {}
    for asset in toc:
        if asset.name in names:
            raise DuplicateAssetError(
                f"Duplicate asset name {asset.name}: {names[asset.name]} and {asset.path}"
            )
        if asset.func in funcs:
            raise DuplicateAssetError(
                f"Assets {funcs[asset.func]} and {asset.name} share identifier {asset.func}"
            )
        names[asset.name] = asset.path
        funcs[asset.func] = asset.name


__all__ = ["Generator", "Observer", "available_parallelism"]
