"""Package descriptor and license files derived from finalized answers."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from skelctl.infrastructure.templates import license_source

_BASIC_KEYS = ("name", "description", "version", "homepage")


def license_names(answers: dict[str, Any]) -> list[str]:
    """The ``licenses`` answer as a list, whether sanitized or still raw."""
    value = answers.get("licenses") or []
    if isinstance(value, str):
        return value.split()
    return [str(v) for v in value]


def compose_author(answers: dict[str, Any]) -> str | None:
    """``Name <email> (url)``, omitting blank parts; None without a name."""
    if "author_name" not in answers:
        return None
    author = str(answers["author_name"])
    if answers.get("author_email"):
        author += f" <{answers['author_email']}>"
    if answers.get("author_url"):
        author += f" ({answers['author_url']})"
    return author


def build_descriptor(answers: dict[str, Any]) -> dict[str, Any]:
    """Assemble the package descriptor mapping from *answers*."""
    pkg: dict[str, Any] = {key: answers[key] for key in _BASIC_KEYS if key in answers}

    author = compose_author(answers)
    if author is not None:
        pkg["author"] = author
    if "repository" in answers:
        pkg["repository"] = {"type": "git", "url": answers["repository"]}
    if "bugs" in answers:
        pkg["bugs"] = {"url": answers["bugs"]}

    homepage = answers.get("homepage", "")
    pkg["licenses"] = [
        {"type": name, "url": f"{homepage}/blob/main/LICENSE-{name}"}
        for name in license_names(answers)
    ]
    pkg["dependencies"] = {}
    pkg["dev_dependencies"] = {}
    pkg["keywords"] = []

    if answers.get("python_requires"):
        pkg["engines"] = {"python": answers["python_requires"]}
    if answers.get("main_module"):
        pkg["main"] = answers["main_module"]
    if answers.get("test_command"):
        pkg["scripts"] = {"test": answers["test_command"]}
    return pkg


def write_descriptor(path: Path, answers: dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(build_descriptor(answers), indent=2) + "\n", encoding="utf-8")


def license_files(answers: dict[str, Any]) -> list[tuple[Path, str]]:
    """``(source, destination name)`` for each chosen license.

    Unknown licenses map to the placeholder text.
    """
    return [(license_source(name), f"LICENSE-{name}") for name in license_names(answers)]
