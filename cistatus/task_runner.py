"""Run the task command and capture its output to the log artifact."""

from __future__ import annotations

import logging
import os
import signal
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Sequence

from cistatus.config.settings import DEFAULT_SHELL
from cistatus.errors import LogArtifactError
from cistatus.utils.shell import resolve_shell

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024


@dataclass
class CommandResult:
    succeeded: bool
    returncode: int | None = None
    error: str = ""

    @property
    def detail(self) -> str:
        if self.error:
            return self.error
        if self.returncode is None:
            return ""
        if self.returncode < 0:
            try:
                name = signal.Signals(-self.returncode).name
            except ValueError:
                name = str(-self.returncode)
            return f"terminated by signal {name}"
        return f"exit status {self.returncode}"


class SinkWriteError(Exception):
    """A fan-out sink rejected a write."""

    def __init__(self, sink_name: str, cause: OSError):
        super().__init__(f"{sink_name}: {cause}")
        self.sink_name = sink_name
        self.cause = cause


class FanOutWriter:
    """Write each chunk to every named sink, in order, before taking the next one."""

    def __init__(self, sinks: Sequence[tuple[str, BinaryIO]]):
        self.sinks = list(sinks)

    def write(self, data: bytes) -> int:
        for name, sink in self.sinks:
            try:
                sink.write(data)
                sink.flush()
            except OSError as exc:
                raise SinkWriteError(name, exc) from exc
        return len(data)


class TaskRunner:
    def __init__(self, shell: str = DEFAULT_SHELL, console: BinaryIO | None = None):
        self.shell = shell
        self.console = console

    def _console(self) -> BinaryIO:
        if self.console is not None:
            return self.console
        return sys.stderr.buffer

    def run(
        self,
        command: str,
        log_path: Path,
        tee_to_console: bool,
        echo_command: bool = True,
    ) -> CommandResult:
        """Run ``command`` through the shell, logging combined output to ``log_path``.

        The log file is truncated up front and closed before returning on every
        path. Failing to start the shell is reported as a failed result; failing
        to create or write the log raises :class:`LogArtifactError`.
        """
        log_path = Path(log_path)
        try:
            log_path.parent.mkdir(parents=True, exist_ok=True)
            logfile = open(log_path, "wb")  # noqa: SIM115 - closed below on every path
        except OSError as exc:
            raise LogArtifactError(f"Cannot create log file {log_path}: {exc}") from exc

        with logfile:
            sinks: list[tuple[str, BinaryIO]] = [(f"log file {log_path}", logfile)]
            if tee_to_console:
                sinks.append(("console", self._console()))
            writer = FanOutWriter(sinks)

            if echo_command:
                logger.info("Running task command: %s", command)
            else:
                logger.info("Running task command")
            logger.info("Logging to %s", log_path)

            try:
                proc = subprocess.Popen(  # noqa: S603
                    [resolve_shell(self.shell), "-c", command],
                    stdin=subprocess.DEVNULL,
                    stdout=subprocess.PIPE,
                    stderr=subprocess.STDOUT,
                    env=os.environ.copy(),
                )
            except OSError as exc:
                logger.error("Failed to start %s: %s", self.shell, exc)
                return CommandResult(succeeded=False, error=str(exc))

            with proc:
                assert proc.stdout is not None
                for chunk in iter(lambda: proc.stdout.read1(CHUNK_SIZE), b""):
                    try:
                        writer.write(chunk)
                    except SinkWriteError as exc:
                        proc.kill()
                        raise LogArtifactError(f"Cannot write task output to {exc.sink_name}: {exc.cause}") from exc
                returncode = proc.wait()

        result = CommandResult(succeeded=returncode == 0, returncode=returncode)
        if not result.succeeded:
            logger.error("Task command failed: %s", result.detail)
        return result
