"""InitService — collect answers for a template and generate the project.

Flow: locate template -> build catalog -> prompt session -> render files
-> package descriptor -> license files. Nothing is written until the
session completes and every file has rendered.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING, Any

from jinja2 import TemplateError as JinjaTemplateError

from skelctl.domain.catalog import PropertyCatalog
from skelctl.infrastructure.process import ExternalCommandRunner
from skelctl.infrastructure.templates import (
    ProjectTemplate,
    TemplateError,
    build_environment,
    find_template,
    iter_template_files,
    list_templates,
    render_destination,
    render_file,
)
from skelctl.infrastructure.terminal import PromptStyle
from skelctl.services.package import license_files, write_descriptor
from skelctl.services.properties import PropertyLibrary
from skelctl.services.result import ServiceResult
from skelctl.services.session import PromptSession, SessionAbortError

if TYPE_CHECKING:
    from skelctl.config.settings import SkelSettings
    from skelctl.services.session import PromptIO

logger = logging.getLogger(__name__)


class InitService:
    """Project generation on top of a :class:`PromptSession`.

    Args:
        settings: Process settings (prompt style, timeouts, template paths).
        io: Prompt device for the session.
        runner: External command runner; built from settings if omitted.
        defaults_path: Explicit operator defaults file (tests, ``--defaults``).
    """

    def __init__(
        self,
        settings: SkelSettings,
        *,
        io: PromptIO,
        runner: ExternalCommandRunner | None = None,
        defaults_path: Path | None = None,
    ) -> None:
        self._settings = settings
        self._io = io
        self._runner = runner or ExternalCommandRunner(timeout=settings.commands.timeout)
        self._defaults_path = defaults_path

    @staticmethod
    def list_templates(settings: SkelSettings) -> ServiceResult:
        op = "list_templates"
        try:
            templates = list_templates(settings.templates.paths)
        except TemplateError as exc:
            return ServiceResult.failure(op, "TEMPLATE_INVALID", str(exc))
        items = [
            {"name": t.name, "description": t.description, "path": str(t.path)}
            for t in templates
        ]
        return ServiceResult.success(op, {"count": len(items), "items": items})

    def init_project(
        self,
        template_name: str,
        destination: Path,
        *,
        force: bool = False,
    ) -> ServiceResult:
        """Prompt for *template_name*'s fields and write the project to *destination*."""
        op = "init_project"
        destination = destination.resolve()
        warnings: list[str] = []

        try:
            template = find_template(template_name, self._settings.templates.paths)
        except TemplateError as exc:
            return ServiceResult.failure(op, "TEMPLATE_INVALID", str(exc))
        if template is None:
            available = [t.name for t in list_templates(self._settings.templates.paths)]
            return ServiceResult.failure(
                op,
                "TEMPLATE_NOT_FOUND",
                f"A valid template name must be specified. Valid templates are: "
                f"{', '.join(available) or '(none)'}",
                available=available,
            )

        if not force:
            existing = self._existing_static_paths(template, destination)
            if existing:
                return ServiceResult.failure(
                    op,
                    "DESTINATION_EXISTS",
                    f"Refusing to overwrite existing files in {destination}",
                    files=existing,
                )

        try:
            catalog = self._catalog(template, destination)
        except (KeyError, ValueError) as exc:
            return ServiceResult.failure(op, "TEMPLATE_INVALID", str(exc.args[0]))

        session = PromptSession(
            catalog,
            io=self._io,
            style=PromptStyle.from_config(self._settings.prompt),
            overrides=self._settings.operator_defaults(self._defaults_path),
        )
        try:
            answers = session.collect()
        except SessionAbortError as exc:
            return ServiceResult.failure(op, "SESSION_ABORTED", str(exc))

        try:
            outputs = self._render(template, answers)
        except JinjaTemplateError as exc:
            return ServiceResult.failure(op, "RENDER_FAILED", str(exc), template=template.name)

        created: list[str] = []
        try:
            self._write(destination, template, answers, outputs, force, warnings, created)
        except OSError as exc:
            logger.debug("write failed under %s", destination, exc_info=True)
            return ServiceResult.failure(
                op,
                "WRITE_FAILED",
                f"Could not write project files: {exc}",
                written=created,
            )
        logger.debug("initialized %s from %s (%d files)", destination, template.name, len(created))
        return ServiceResult.success(
            op,
            {
                "template": template.name,
                "destination": str(destination),
                "answers": answers,
                "files_created": created,
            },
            warnings=warnings,
            meta={"passes": session.passes},
        )

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    def _catalog(self, template: ProjectTemplate, destination: Path) -> PropertyCatalog:
        library = PropertyLibrary(self._runner, cwd=destination)
        entries: list[str | tuple[str, Any]] = [
            (f.name, f.default) if f.has_default else f.name for f in template.fields
        ]
        return library.catalog(entries)

    @staticmethod
    def _existing_static_paths(template: ProjectTemplate, destination: Path) -> list[str]:
        """Destination files that would certainly be overwritten."""
        planned = [
            rel.as_posix().removesuffix(".j2")
            for rel in iter_template_files(template)
            if "{" not in rel.as_posix()
        ]
        if template.package_file:
            planned.append(template.package_file)
        return [p for p in planned if (destination / p).exists()]

    @staticmethod
    def _render(template: ProjectTemplate, answers: dict[str, Any]) -> dict[Path, str]:
        env = build_environment(template.root)
        outputs: dict[Path, str] = {}
        for relative in iter_template_files(template):
            dest = render_destination(env, relative, answers)
            outputs[dest] = render_file(env, relative, answers)
        return outputs

    @staticmethod
    def _write(
        destination: Path,
        template: ProjectTemplate,
        answers: dict[str, Any],
        outputs: dict[Path, str],
        force: bool,
        warnings: list[str],
        created: list[str],
    ) -> None:
        """Write every output under *destination*, recording each finished file in *created*."""

        def put(relative: str, write: Callable[[Path], None]) -> None:
            target = destination / relative
            if target.exists() and not force:
                warnings.append(f"Skipped existing file: {relative}")
                return
            target.parent.mkdir(parents=True, exist_ok=True)
            write(target)
            created.append(relative)

        for relative, content in outputs.items():
            put(relative.as_posix(), lambda t, c=content: t.write_text(c, encoding="utf-8"))

        for source, name in license_files(answers):
            put(name, lambda t, s=source: t.write_text(s.read_text(encoding="utf-8"), encoding="utf-8"))

        if template.package_file:
            put(template.package_file, lambda t: write_descriptor(t, answers))
