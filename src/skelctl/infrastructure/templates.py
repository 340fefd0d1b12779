"""Project template discovery and Jinja2 rendering.

A template is a directory holding a ``template.toml`` manifest and a
``root/`` tree of files::

    description = "Python package"
    package_file = "package.json"      # optional descriptor to write

    [[fields]]
    name = "name"

    [[fields]]
    name = "version"
    default = "1.0.0"                  # optional alternate default

Files under ``root/`` are rendered with the finalized answers; their
relative paths are rendered too, and a trailing ``.j2`` is dropped.
Configured search paths are consulted before the packaged templates.
"""

from __future__ import annotations

import tomllib
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined

PACKAGE_ROOT = Path(__file__).resolve().parent.parent
PACKAGED_TEMPLATES = PACKAGE_ROOT / "templates"
LICENSES_DIR = PACKAGE_ROOT / "licenses"
PLACEHOLDER_LICENSE = LICENSES_DIR / "placeholder"

MANIFEST_FILENAME = "template.toml"
TEMPLATE_SUFFIX = ".j2"


class TemplateError(Exception):
    """A template manifest is missing or malformed."""


@dataclass(frozen=True)
class TemplateField:
    """One ``[[fields]]`` entry; ``has_default`` marks an alternate default."""

    name: str
    default: str | None = None
    has_default: bool = False


@dataclass(frozen=True)
class ProjectTemplate:
    name: str
    path: Path
    description: str = ""
    fields: tuple[TemplateField, ...] = field(default_factory=tuple)
    package_file: str | None = None

    @property
    def root(self) -> Path:
        return self.path / "root"


def load_template(path: Path) -> ProjectTemplate:
    """Parse ``template.toml`` in *path*."""
    manifest = path / MANIFEST_FILENAME
    if not manifest.is_file():
        msg = f"No {MANIFEST_FILENAME} in {path}"
        raise TemplateError(msg)
    try:
        data = tomllib.loads(manifest.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        msg = f"Invalid TOML in {manifest}: {exc}"
        raise TemplateError(msg) from exc

    fields: list[TemplateField] = []
    for entry in data.get("fields", []):
        if isinstance(entry, str):
            fields.append(TemplateField(entry))
            continue
        if not isinstance(entry, dict) or "name" not in entry:
            msg = f"Each field in {manifest} needs a name"
            raise TemplateError(msg)
        if "default" in entry:
            fields.append(TemplateField(entry["name"], str(entry["default"]), True))
        else:
            fields.append(TemplateField(entry["name"]))

    return ProjectTemplate(
        name=path.name,
        path=path,
        description=str(data.get("description", "")),
        fields=tuple(fields),
        package_file=data.get("package_file"),
    )


def template_dirs(extra: Iterable[Path] = ()) -> list[Path]:
    """Search directories in priority order."""
    return [*(Path(p).expanduser() for p in extra), PACKAGED_TEMPLATES]


def _candidates(extra: Iterable[Path]) -> Iterator[Path]:
    for base in template_dirs(extra):
        if not base.is_dir():
            continue
        for child in sorted(base.iterdir()):
            if (child / MANIFEST_FILENAME).is_file():
                yield child


def list_templates(extra: Iterable[Path] = ()) -> list[ProjectTemplate]:
    """All templates, earlier search paths shadowing later ones by name."""
    found: dict[str, ProjectTemplate] = {}
    for path in _candidates(extra):
        if path.name not in found:
            found[path.name] = load_template(path)
    return sorted(found.values(), key=lambda t: t.name)


def find_template(name: str, extra: Iterable[Path] = ()) -> ProjectTemplate | None:
    for path in _candidates(extra):
        if path.name == name:
            return load_template(path)
    return None


# ---------------------------------------------------------------------------
# Licenses
# ---------------------------------------------------------------------------


def available_licenses() -> list[str]:
    """License names with a bundled text (``LICENSE-MIT`` -> ``MIT``)."""
    if not LICENSES_DIR.is_dir():
        return []
    return sorted(
        p.name.removeprefix("LICENSE-")
        for p in LICENSES_DIR.iterdir()
        if p.name.startswith("LICENSE-")
    )


def license_source(name: str) -> Path:
    """Bundled text for license *name*, or the placeholder."""
    candidate = LICENSES_DIR / f"LICENSE-{name}"
    return candidate if candidate.is_file() else PLACEHOLDER_LICENSE


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


def build_environment(search_path: Path) -> Environment:
    """Jinja2 environment rooted at *search_path*; undefined names are errors."""
    return Environment(
        loader=FileSystemLoader(str(search_path)),
        keep_trailing_newline=True,
        undefined=StrictUndefined,
    )


def iter_template_files(template: ProjectTemplate) -> Iterator[Path]:
    """Files under the template's ``root/``, relative, in sorted order."""
    if not template.root.is_dir():
        return
    for path in sorted(template.root.rglob("*")):
        if path.is_file():
            yield path.relative_to(template.root)


def render_destination(env: Environment, relative: Path, context: dict[str, Any]) -> Path:
    """Render a template-relative path into a destination-relative one."""
    rendered = env.from_string(relative.as_posix()).render(context)
    return Path(rendered.removesuffix(TEMPLATE_SUFFIX))


def render_file(env: Environment, relative: Path, context: dict[str, Any]) -> str:
    return env.get_template(relative.as_posix()).render(context)
