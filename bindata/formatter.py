"""External source formatter invoked on generated modules."""

from __future__ import annotations

import subprocess
from typing import Callable, Sequence

from .config import DEFAULT_FORMATTER
from .errors import FormatterError


class Formatter:
    """Runs a formatter executable with the generated file as last argument."""

    def __init__(
        self,
        command: Sequence[str] = DEFAULT_FORMATTER,
        runner: Callable[[Sequence[str]], None] | None = None,
    ) -> None:
        if not command:
            raise ValueError("Formatter command must not be empty")
        self.command = list(command)
        self._runner = runner or self._default_runner

    def format(self, path: str) -> None:
        args = [*self.command, path]
        try:
            self._runner(args)
        except FileNotFoundError as exc:
            raise FormatterError(f"Formatter not found: {self.command[0]}") from exc
        except subprocess.CalledProcessError as exc:
            detail = (exc.stderr or "").strip()
            message = f"{self.command[0]} exited with status {exc.returncode}"
            if detail:
                message = f"{message}: {detail}"
            raise FormatterError(message) from exc

    @staticmethod
    def _default_runner(args: Sequence[str]) -> None:
        subprocess.run(
            list(args),
            check=True,
            text=True,
            capture_output=True,
        )


__all__ = ["Formatter"]
