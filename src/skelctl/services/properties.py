"""Built-in field library — the common questions every template asks.

Templates name the fields they want (optionally with an alternate
default) and :class:`PropertyLibrary` hands back ready descriptors.
Dynamic defaults consult git in the destination directory, or derive
from earlier answers (``bugs`` from ``repository``, ``main_module`` from
``name``).
"""

from __future__ import annotations

import re
import sys
from collections.abc import Callable, Iterable, Mapping
from pathlib import Path
from typing import Any

from skelctl.domain.catalog import PropertyCatalog
from skelctl.domain.fields import FieldDescriptor, dynamic, static
from skelctl.domain.versions import is_semver
from skelctl.infrastructure.git import GitLookup
from skelctl.infrastructure.process import ExternalCommandRunner
from skelctl.infrastructure.templates import available_licenses
from skelctl.services.resolver import ResolverError

NAME_PATTERN = re.compile(r"^[\w\-]+$")
LICENSES_PATTERN = re.compile(r"^[\w\-.]+(?:\s+[\w\-.]+)*$")

_UNSET: Any = object()


def safe_identifier(value: str) -> str:
    """Identifier-safe form of a project name (``my-proj`` -> ``my_proj``)."""
    ident = re.sub(r"[\W_]+", "_", value)
    return re.sub(r"^(\d)", r"_\1", ident)


def _sanitize_name(value: str, answers: dict[str, Any]) -> str:
    answers["safe_name"] = safe_identifier(value)
    return value


def _sanitize_licenses(value: str, answers: dict[str, Any]) -> list[str]:
    return value.split()


def _require(answers: Mapping[str, Any], key: str, field: str) -> str:
    if key not in answers:
        msg = f"'{field}' default needs an earlier '{key}' answer"
        raise ResolverError(msg)
    return str(answers[key])


class PropertyLibrary:
    """Factory for the built-in :class:`FieldDescriptor` set.

    Args:
        runner: Runs git for dynamic defaults.
        cwd: Directory whose git repository is consulted.
    """

    def __init__(self, runner: ExternalCommandRunner, cwd: Path | None = None) -> None:
        self._cwd = cwd or Path.cwd()
        self._git = GitLookup(runner, self._cwd)
        self._builders: dict[str, Callable[[], FieldDescriptor]] = {
            "name": self._name,
            "description": self._description,
            "version": self._version,
            "homepage": self._homepage,
            "repository": self._repository,
            "bugs": self._bugs,
            "licenses": self._licenses,
            "author_name": self._author_name,
            "author_email": self._author_email,
            "author_url": self._author_url,
            "python_requires": self._python_requires,
            "main_module": self._main_module,
            "test_command": self._test_command,
        }

    def names(self) -> list[str]:
        return list(self._builders)

    def get(self, name: str, default: Any = _UNSET) -> FieldDescriptor:
        """Descriptor for *name*, with *default* replacing the built-in one.

        Raises KeyError for an unknown property name.
        """
        try:
            builder = self._builders[name]
        except KeyError:
            msg = f"Unknown property: {name}"
            raise KeyError(msg) from None
        descriptor = builder()
        if default is not _UNSET:
            descriptor = descriptor.with_default(str(default))
        return descriptor

    def catalog(self, names: Iterable[str | tuple[str, Any]]) -> PropertyCatalog:
        """Build a catalog from names or ``(name, alternate_default)`` pairs."""
        catalog = PropertyCatalog()
        for entry in names:
            if isinstance(entry, tuple):
                catalog.add(self.get(*entry))
            else:
                catalog.add(self.get(entry))
        return catalog

    # ------------------------------------------------------------------
    # Descriptors
    # ------------------------------------------------------------------

    def _name(self) -> FieldDescriptor:
        return FieldDescriptor(
            name="name",
            message="Project name",
            default=static(self._cwd.name),
            validator=NAME_PATTERN,
            warning="Name must be only letters, numbers, dashes or underscores.",
            sanitize=_sanitize_name,
        )

    def _description(self) -> FieldDescriptor:
        return FieldDescriptor(
            name="description",
            message="Description",
            default=static("The best project ever."),
        )

    def _version(self) -> FieldDescriptor:
        git = self._git

        async def from_tags(answers: Mapping[str, Any]) -> str:
            return await git.version()

        return FieldDescriptor(
            name="version",
            message="Version",
            default=dynamic(from_tags),
            validator=is_semver,
            warning="Must be a valid semantic version.",
        )

    def _homepage(self) -> FieldDescriptor:
        git = self._git

        async def from_origin(answers: Mapping[str, Any]) -> str:
            return await git.homepage()

        return FieldDescriptor(
            name="homepage",
            message="Project homepage",
            default=dynamic(from_origin),
        )

    def _repository(self) -> FieldDescriptor:
        git = self._git

        async def from_origin(answers: Mapping[str, Any]) -> str:
            return await git.repository()

        return FieldDescriptor(
            name="repository",
            message="Project git repository",
            default=dynamic(from_origin),
        )

    def _bugs(self) -> FieldDescriptor:
        async def from_repository(answers: Mapping[str, Any]) -> str:
            repo = _require(answers, "repository", "bugs")
            repo = re.sub(r"^git", "https", repo)
            return re.sub(r"\.git$", "/issues", repo)

        return FieldDescriptor(
            name="bugs",
            message="Project issues tracker",
            default=dynamic(from_repository),
        )

    def _licenses(self) -> FieldDescriptor:
        known = " ".join(available_licenses())
        return FieldDescriptor(
            name="licenses",
            message="Licenses",
            default=static("MIT"),
            validator=LICENSES_PATTERN,
            warning=f"Must be one or more space-separated licenses. (eg. {known})",
            sanitize=_sanitize_licenses,
        )

    def _author_name(self) -> FieldDescriptor:
        git = self._git

        async def from_config(answers: Mapping[str, Any]) -> str:
            return await git.config_value("user.name")

        return FieldDescriptor(
            name="author_name",
            message="Author name",
            default=dynamic(from_config),
        )

    def _author_email(self) -> FieldDescriptor:
        git = self._git

        async def from_config(answers: Mapping[str, Any]) -> str:
            return await git.config_value("user.email")

        return FieldDescriptor(
            name="author_email",
            message="Author email",
            default=dynamic(from_config),
        )

    def _author_url(self) -> FieldDescriptor:
        return FieldDescriptor(name="author_url", message="Author url", default=static("none"))

    def _python_requires(self) -> FieldDescriptor:
        running = f"{sys.version_info.major}.{sys.version_info.minor}"
        return FieldDescriptor(
            name="python_requires",
            message="What versions of Python does it run on?",
            default=static(f">={running}"),
        )

    def _main_module(self) -> FieldDescriptor:
        async def from_name(answers: Mapping[str, Any]) -> str:
            return safe_identifier(_require(answers, "name", "main_module"))

        return FieldDescriptor(
            name="main_module",
            message="Main module/entry point",
            default=dynamic(from_name),
        )

    def _test_command(self) -> FieldDescriptor:
        return FieldDescriptor(name="test_command", message="Test command", default=static("pytest"))
