"""Shared pytest fixtures and test doubles for skelctl tests."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

import pytest
from click.testing import CliRunner

from skelctl.infrastructure.process import CommandResult, CommandSpec
from skelctl.infrastructure.terminal import PromptStyle


class ScriptedPrompter:
    """PromptIO that replays scripted answers and records every exchange.

    An empty scripted answer means "press enter" and yields the default.
    """

    def __init__(self, answers: Iterable[str] = ()) -> None:
        self._answers = list(answers)
        self.asked: list[tuple[str, str]] = []
        self.warnings: list[str] = []
        self.banners: list[str] = []

    def banner(self, text: str) -> None:
        self.banners.append(text)

    def warn(self, text: str) -> None:
        self.warnings.append(text)

    async def ask(self, label: str, default: str) -> str:
        self.asked.append((label, default))
        if not self._answers:
            raise EOFError(f"no scripted answer for {label!r}")
        answer = self._answers.pop(0)
        return answer or default

    @property
    def messages(self) -> list[str]:
        """Asked messages without the ``[?] `` prefix."""
        return [label.removeprefix("[?] ") for label, _ in self.asked]

    @property
    def defaults(self) -> list[str]:
        return [default for _, default in self.asked]


class FakeRunner:
    """Stand-in for ExternalCommandRunner with canned results keyed by argv.

    Unknown commands fail. Fallbacks are honored the same way the real
    runner honors them.
    """

    def __init__(self) -> None:
        self._responses: dict[tuple[str, ...], CommandResult] = {}
        self.calls: list[CommandSpec] = []

    def respond(self, argv: tuple[str, ...], result: CommandResult) -> None:
        self._responses[argv] = result

    async def run(self, spec: CommandSpec) -> CommandResult:
        self.calls.append(spec)
        result = self._responses.get(
            tuple(spec.argv), CommandResult.failure("unknown command", returncode=1)
        )
        if not result.ok and spec.fallback is not None:
            return CommandResult.success(spec.fallback, returncode=result.returncode)
        return result


@pytest.fixture(autouse=True)
def _isolated_config(tmp_path_factory: pytest.TempPathFactory, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's real config and defaults files out of tests."""
    xdg = tmp_path_factory.mktemp("xdg")
    monkeypatch.setenv("XDG_CONFIG_HOME", str(xdg))
    monkeypatch.delenv("SKELCTL_CONFIG", raising=False)
    monkeypatch.delenv("SKELCTL_DEFAULTS", raising=False)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def plain_style() -> PromptStyle:
    """Prompt style without ANSI colors, for readable assertions."""
    return PromptStyle(color=False)


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def scripted():
    """Factory: ``scripted("a", "", "Y")`` -> ScriptedPrompter."""

    def make(*answers: str) -> ScriptedPrompter:
        return ScriptedPrompter(answers)

    return make


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """Empty destination directory named like a project."""
    dest = tmp_path / "demo-proj"
    dest.mkdir()
    return dest
