"""Tests for PromptSession ordering, retries, restarts, and aborts."""

from __future__ import annotations

import asyncio
import re
import sys
from collections.abc import Mapping
from typing import Any

import pytest

from skelctl.domain.catalog import PropertyCatalog
from skelctl.domain.fields import FieldDescriptor, StaticDefault, dynamic, static
from skelctl.infrastructure.process import CommandSpec, ExternalCommandRunner
from skelctl.infrastructure.terminal import PromptStyle
from skelctl.services.resolver import ResolverError
from skelctl.services.session import (
    CONFIRM_MESSAGE,
    PromptSession,
    SessionAbortError,
    SessionState,
    is_affirmative,
)

NAME_WARNING = "Name must be only letters, numbers, dashes or underscores."


def _name_field(**kwargs: Any) -> FieldDescriptor:
    kwargs.setdefault("default", static("proj"))
    return FieldDescriptor(
        "name",
        "Project name",
        validator=re.compile(r"^[\w\-]+$"),
        warning=NAME_WARNING,
        **kwargs,
    )


def _basic_catalog() -> PropertyCatalog:
    return PropertyCatalog([_name_field(), FieldDescriptor("version", "Version", static("0.1.0"))])


def _run(catalog: PropertyCatalog, io: Any, **kwargs: Any) -> dict[str, Any]:
    kwargs.setdefault("style", PromptStyle(color=False))
    return asyncio.run(PromptSession(catalog, io=io, **kwargs).run())


class TestIsAffirmative:
    @pytest.mark.parametrize("answer", ["Y", "y", "yes", "YES", "Y/n", "y/n", "okay"])
    def test_yes(self, answer: str) -> None:
        assert is_affirmative(answer) is True

    @pytest.mark.parametrize("answer", ["n", "N", "no", "nope", "", None])
    def test_no(self, answer: str | None) -> None:
        assert is_affirmative(answer) is False


class TestEndToEnd:
    def test_accept_all_defaults(self, scripted) -> None:
        io = scripted("", "", "Y")
        result = _run(_basic_catalog(), io)
        assert result == {"name": "proj", "version": "0.1.0"}
        assert io.messages == ["Project name", "Version", CONFIRM_MESSAGE]

    def test_invalid_answer_reasks_same_field_first(self, scripted) -> None:
        io = scripted("bad name!", "good-name", "", "Y")
        result = _run(_basic_catalog(), io)
        assert io.messages == ["Project name", "Project name", "Version", CONFIRM_MESSAGE]
        assert io.warnings == [NAME_WARNING]
        assert result["name"] == "good-name"

    def test_declined_confirmation_carries_answers_forward(self, scripted) -> None:
        io = scripted("x", "", "n", "", "", "Y")
        session = PromptSession(_basic_catalog(), io=io, style=PromptStyle(color=False))
        result = asyncio.run(session.run())
        assert io.asked[3] == ("[?] Project name", "x")
        assert io.asked[4] == ("[?] Version", "0.1.0")
        assert result == {"name": "x", "version": "0.1.0"}
        assert session.passes == 2
        assert len(io.banners) == 2

    def test_command_fallback_none_is_blanked(self, scripted) -> None:
        runner = ExternalCommandRunner()

        @dynamic
        async def author(answers: Mapping[str, Any]) -> str:
            spec = CommandSpec(sys.executable, ("-c", "import sys; sys.exit(1)"), fallback="none")
            return (await runner.run(spec)).unwrap()

        io = scripted("", "Y")
        result = _run(PropertyCatalog([FieldDescriptor("author_name", "Author", author)]), io)
        assert io.defaults[0] == "none"
        assert result == {"author_name": ""}


class TestOrdering:
    def test_confirmation_last_and_not_returned(self, scripted) -> None:
        io = scripted("a", "b", "c", "")
        catalog = PropertyCatalog(FieldDescriptor(n, n.upper()) for n in ("one", "two", "three"))
        result = _run(catalog, io)
        assert io.messages == ["ONE", "TWO", "THREE", CONFIRM_MESSAGE]
        assert list(result) == ["one", "two", "three"]
        assert "answers_valid" not in result

    def test_confirmation_default(self, scripted) -> None:
        io = scripted("", "")
        _run(_basic_catalog(), io)
        assert io.asked[-1][1] == "Y/n"

    def test_resolvers_see_only_earlier_answers(self, scripted) -> None:
        seen: dict[str, dict[str, Any]] = {}

        def recorder(name: str):
            @dynamic
            async def resolve(answers: Mapping[str, Any]) -> str:
                seen[name] = dict(answers)
                return f"{name}-default"

            return resolve

        catalog = PropertyCatalog(
            [
                FieldDescriptor("a", "A", recorder("a")),
                FieldDescriptor("b", "B", recorder("b")),
                FieldDescriptor("c", "C", recorder("c")),
            ]
        )
        _run(catalog, scripted("1", "", "3", "Y"))
        assert seen == {"a": {}, "b": {"a": "1"}, "c": {"a": "1", "b": "b-default"}}

    def test_resolver_answers_are_read_only(self, scripted) -> None:
        @dynamic
        async def meddle(answers: Mapping[str, Any]) -> str:
            answers["name"] = "hijacked"  # type: ignore[index]
            return "x"

        catalog = PropertyCatalog([_name_field(), FieldDescriptor("m", "M", meddle)])
        with pytest.raises(SessionAbortError):
            _run(catalog, scripted("", "", "Y"))

    def test_derived_default_from_earlier_answer(self, scripted) -> None:
        @dynamic
        async def main(answers: Mapping[str, Any]) -> str:
            return f"lib/{answers['name']}"

        catalog = PropertyCatalog([_name_field(), FieldDescriptor("main", "Main", main)])
        io = scripted("widget", "", "Y")
        assert _run(catalog, io)["main"] == "lib/widget"
        assert io.defaults[1] == "lib/widget"


class TestRestart:
    def test_second_pass_defaults_are_raw_answers(self, scripted) -> None:
        catalog = PropertyCatalog(
            [FieldDescriptor("licenses", "Licenses", static("MIT"), sanitize=lambda v, a: v.split())]
        )
        io = scripted("MIT Apache-2.0", "n", "", "Y")
        result = _run(catalog, io)
        assert io.asked[2] == ("[?] Licenses", "MIT Apache-2.0")
        assert result == {"licenses": ["MIT", "Apache-2.0"]}

    def test_dynamic_default_replaced_by_carried_answer(self, scripted) -> None:
        calls: list[int] = []

        @dynamic
        async def resolve(answers: Mapping[str, Any]) -> str:
            calls.append(1)
            return "computed"

        catalog = PropertyCatalog([FieldDescriptor("x", "X", resolve)])
        io = scripted("typed", "no", "", "y")
        assert _run(catalog, io) == {"x": "typed"}
        assert calls == [1]
        assert io.defaults == ["computed", "Y/n", "typed", "Y/n"]

    def test_sanitizers_run_once_after_acceptance(self, scripted) -> None:
        sanitized: list[str] = []

        def track(value: str, answers: dict[str, Any]) -> str:
            sanitized.append(value)
            return value.upper()

        catalog = PropertyCatalog([FieldDescriptor("x", "X", static("a"), sanitize=track)])
        result = _run(catalog, scripted("first", "n", "second", "n", "", "Y"))
        assert sanitized == ["second"]
        assert result == {"x": "SECOND"}

    def test_catalog_not_modified(self, scripted) -> None:
        catalog = _basic_catalog()
        _run(catalog, scripted("x", "", "n", "", "", "Y"))
        assert catalog.get("name").default == StaticDefault("proj")

    def test_working_fields_show_carried_defaults(self, scripted) -> None:
        session = PromptSession(
            _basic_catalog(), io=scripted("x", "", "n", "", "", "Y"), style=PromptStyle(color=False)
        )
        session.collect()
        assert session.fields[0].default == StaticDefault("x")


class TestOverrides:
    def test_override_used_on_first_pass(self, scripted) -> None:
        io = scripted("", "", "Y")
        result = _run(_basic_catalog(), io, overrides={"version": "2.0.0", "unknown": "z"})
        assert io.defaults[1] == "2.0.0"
        assert result == {"name": "proj", "version": "2.0.0"}

    def test_carried_answer_beats_override_after_restart(self, scripted) -> None:
        io = scripted("", "3.0.0", "n", "", "", "Y")
        result = _run(_basic_catalog(), io, overrides={"version": "2.0.0"})
        assert io.asked[4] == ("[?] Version", "3.0.0")
        assert result["version"] == "3.0.0"


class TestRecovery:
    def test_resolver_error_shows_placeholder(self, scripted) -> None:
        @dynamic
        async def broken(answers: Mapping[str, Any]) -> str:
            raise ResolverError("no data")

        io = scripted("typed over", "Y")
        assert _run(PropertyCatalog([FieldDescriptor("x", "X", broken)]), io) == {"x": "typed over"}
        assert io.defaults[0] == "???"

    def test_retry_does_not_rerun_resolver(self, scripted) -> None:
        calls: list[int] = []

        @dynamic
        async def resolve(answers: Mapping[str, Any]) -> str:
            calls.append(1)
            return "not valid!"

        catalog = PropertyCatalog([_name_field(default=resolve)])
        io = scripted("", "fixed", "Y")
        assert _run(catalog, io) == {"name": "fixed"}
        assert calls == [1]
        assert io.defaults[:2] == ["not valid!", "not valid!"]

    def test_empty_catalog_only_confirms(self, scripted) -> None:
        io = scripted("")
        assert _run(PropertyCatalog(), io) == {}
        assert io.messages == [CONFIRM_MESSAGE]


class TestAbort:
    def test_input_failure_aborts(self, scripted) -> None:
        with pytest.raises(SessionAbortError) as excinfo:
            _run(_basic_catalog(), scripted("proj"))
        assert isinstance(excinfo.value.__cause__, EOFError)

    def test_structural_resolver_error_aborts(self, scripted) -> None:
        @dynamic
        async def explode(answers: Mapping[str, Any]) -> str:
            raise RuntimeError("bug")

        with pytest.raises(SessionAbortError, match="bug"):
            _run(PropertyCatalog([FieldDescriptor("x", "X", explode)]), scripted("", "Y"))

    def test_sanitizer_error_aborts(self, scripted) -> None:
        def bad(value: str, answers: dict[str, Any]) -> str:
            raise ValueError("cannot sanitize")

        catalog = PropertyCatalog([FieldDescriptor("x", "X", sanitize=bad)])
        with pytest.raises(SessionAbortError, match="cannot sanitize"):
            _run(catalog, scripted("v", "Y"))

    def test_validator_exception_aborts(self, scripted) -> None:
        def raises(value: str) -> bool:
            raise TypeError("validator bug")

        catalog = PropertyCatalog([FieldDescriptor("x", "X", validator=raises)])
        with pytest.raises(SessionAbortError):
            _run(catalog, scripted("v", "Y"))


class TestState:
    def test_complete_after_run(self, scripted) -> None:
        session = PromptSession(_basic_catalog(), io=scripted("", "", "Y"))
        assert session.state is SessionState.IDLE
        session.collect()
        assert session.state is SessionState.COMPLETE
        assert session.passes == 1

    def test_cannot_run_twice(self, scripted) -> None:
        session = PromptSession(_basic_catalog(), io=scripted("", "", "Y"))
        session.collect()
        with pytest.raises(SessionAbortError, match="already started"):
            session.collect()

    def test_banner_uses_style(self, scripted) -> None:
        io = scripted("", "", "Y")
        _run(_basic_catalog(), io, style=PromptStyle(banner="Tell me:", color=False))
        assert io.banners == ["Tell me:"]
