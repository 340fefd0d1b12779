"""ExternalCommandRunner — async subprocess execution with optional fallback.

Each call spawns one process, buffers stdout and stderr separately until
exit, and delivers exactly one :class:`CommandResult`.

* Exit code 0: success carrying stdout with trailing whitespace stripped.
* Non-zero exit with a fallback: success carrying the fallback unchanged.
* Non-zero exit without a fallback: failure carrying trimmed stderr.

A binary that cannot be spawned, or a call that exceeds its timeout, is
handled exactly like a non-zero exit. No timeout applies unless one is set
on the :class:`CommandSpec` or on the runner.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)


class ExternalCommandError(Exception):
    """An external command failed and no fallback was configured."""

    def __init__(self, message: str, *, returncode: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.returncode = returncode


@dataclass(frozen=True)
class CommandSpec:
    """What to run. Constructed per call, never persisted.

    ``fallback=None`` means no fallback is configured.
    """

    command: str
    args: tuple[str, ...] = ()
    cwd: Path | None = None
    env: Mapping[str, str] | None = None
    fallback: str | None = None
    timeout: float | None = None

    @property
    def argv(self) -> list[str]:
        return [self.command, *self.args]


@dataclass(frozen=True)
class CommandResult:
    """Outcome of one command invocation."""

    ok: bool
    value: str = ""
    error: str = ""
    returncode: int | None = None

    @classmethod
    def success(cls, value: str, *, returncode: int | None = 0) -> CommandResult:
        return cls(ok=True, value=value, returncode=returncode)

    @classmethod
    def failure(cls, error: str, *, returncode: int | None = None) -> CommandResult:
        return cls(ok=False, error=error, returncode=returncode)

    def unwrap(self) -> str:
        """Return the value, or raise :class:`ExternalCommandError` on failure."""
        if not self.ok:
            raise ExternalCommandError(self.error, returncode=self.returncode)
        return self.value


def _trim(raw: bytes) -> str:
    return raw.decode("utf-8", errors="replace").rstrip()


class ExternalCommandRunner:
    """Runs external commands on the current event loop.

    Args:
        timeout: Default timeout in seconds for specs that set none.
            ``None`` waits indefinitely.
    """

    def __init__(self, *, timeout: float | None = None) -> None:
        self._timeout = timeout

    async def run(self, spec: CommandSpec) -> CommandResult:
        timeout = spec.timeout if spec.timeout is not None else self._timeout
        try:
            proc = await asyncio.create_subprocess_exec(
                *spec.argv,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=spec.cwd,
                env=dict(spec.env) if spec.env is not None else None,
            )
        except OSError as exc:
            logger.debug("spawn failed for %s: %s", spec.command, exc)
            return self._failed(spec, str(exc), None)

        try:
            stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout)
        except TimeoutError:
            proc.kill()
            await proc.wait()
            logger.debug("%s timed out after %ss", spec.command, timeout)
            return self._failed(spec, f"{spec.command} timed out after {timeout}s", None)

        if proc.returncode == 0:
            return CommandResult.success(_trim(stdout))
        return self._failed(spec, _trim(stderr), proc.returncode)

    @staticmethod
    def _failed(spec: CommandSpec, error: str, returncode: int | None) -> CommandResult:
        if spec.fallback is not None:
            logger.debug("%s failed (%s); using fallback", " ".join(spec.argv), returncode)
            return CommandResult.success(spec.fallback, returncode=returncode)
        return CommandResult.failure(error, returncode=returncode)
