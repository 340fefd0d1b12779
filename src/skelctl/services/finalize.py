"""AnswerFinalizer — sanitize a confirmed result set.

Runs once per session, after the user accepts the answers. Sanitizers may
read sibling answers and may add derived keys (``safe_name``); the literal
placeholder ``"none"`` is then blanked for every confirmed field.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from skelctl.domain.fields import FieldDescriptor, Sanitizer

NONE_PLACEHOLDER = "none"


class AnswerFinalizer:
    """Apply per-field sanitizers and placeholder suppression."""

    def __init__(self, fields: Iterable[FieldDescriptor]) -> None:
        self._sanitizers: dict[str, Sanitizer] = {
            f.name: f.sanitize for f in fields if f.sanitize is not None
        }

    def finalize(self, confirmed: Mapping[str, Any]) -> dict[str, Any]:
        """Return the finalized answers; *confirmed* itself is left untouched."""
        result = dict(confirmed)
        # Keys added by sanitizers are kept but not visited.
        for key in list(result):
            sanitize = self._sanitizers.get(key)
            if sanitize is not None:
                result[key] = sanitize(result[key], result)
            if result[key] == NONE_PLACEHOLDER:
                result[key] = ""
        return result
