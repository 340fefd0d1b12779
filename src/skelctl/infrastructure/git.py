"""Git lookups used to suggest defaults for new projects.

All calls go through :class:`ExternalCommandRunner`, so a missing git
binary or a directory outside any repository surfaces as a failed
:class:`CommandResult` rather than an exception from the spawn itself.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

from skelctl.domain.versions import valid_semver
from skelctl.infrastructure.process import (
    CommandResult,
    CommandSpec,
    ExternalCommandError,
    ExternalCommandRunner,
)

logger = logging.getLogger(__name__)

DEFAULT_VERSION = "0.1.0"

_ORIGIN_LINE = re.compile(r"^origin\s")
_GITHUB_SSH = re.compile(r"^git@(github\.com):")


def existing_ancestor(path: Path) -> Path:
    """*path* itself if it is a directory, else its nearest existing parent."""
    current = path.resolve()
    while not current.is_dir() and current != current.parent:
        current = current.parent
    return current


class GitLookup:
    """Read-only queries against the git repository around *cwd*.

    A *cwd* that does not exist yet (a project about to be created) is
    queried from its nearest existing parent directory.
    """

    def __init__(self, runner: ExternalCommandRunner, cwd: Path | None = None) -> None:
        self._runner = runner
        self._cwd = cwd

    async def _run_git(self, *args: str, fallback: str | None = None) -> CommandResult:
        cwd = existing_ancestor(self._cwd) if self._cwd is not None else None
        spec = CommandSpec("git", args, cwd=cwd, fallback=fallback)
        return await self._runner.run(spec)

    async def version(self) -> str:
        """Latest tag as semver (``v1.2.3-4-gabc`` -> ``1.2.3``), or ``0.1.0``."""
        result = await self._run_git("describe", "--tags")
        tag = result.value.split("-")[0] if result.ok and result.value else None
        return valid_semver(tag) or DEFAULT_VERSION

    async def origin(self) -> str:
        """URL of the ``origin`` remote.

        Raises ExternalCommandError if git fails or no origin is configured.
        """
        output = (await self._run_git("remote", "-v")).unwrap()
        lines = [line for line in output.splitlines() if _ORIGIN_LINE.match(line)]
        if not lines:
            raise ExternalCommandError("no origin remote configured")
        return lines[0].split()[1]

    async def homepage(self) -> str:
        """Browser URL derived from origin, or ``none``."""
        try:
            url = await self.origin()
        except ExternalCommandError as exc:
            logger.debug("no homepage from git: %s", exc)
            return "none"
        url = re.sub(r"\.git$", "", url)
        return _GITHUB_SSH.sub(r"https://\1/", url)

    async def repository(self) -> str:
        """Clonable URL derived from origin, or ``none``."""
        try:
            url = await self.origin()
        except ExternalCommandError as exc:
            logger.debug("no repository from git: %s", exc)
            return "none"
        return _GITHUB_SSH.sub(r"git://\1/", url)

    async def config_value(self, key: str, *, fallback: str = "none") -> str:
        """Value of ``git config --get <key>``, or *fallback*."""
        result = await self._run_git("config", "--get", key, fallback=fallback)
        return result.unwrap()
