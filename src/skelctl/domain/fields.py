"""Field descriptors — one unit of information collected from the user.

A field's default is a tagged variant: :class:`StaticDefault` carries a
plain value, :class:`DynamicDefault` carries a coroutine function that
computes the value from the answers given so far in the current pass.

INVARIANT: A dynamic resolver only ever sees fields declared before it.
"""

from __future__ import annotations

import re
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, replace
from typing import Any

# Field name reserved for the trailing "Are these answers correct?" question.
CONFIRM_FIELD = "answers_valid"

DefaultFn = Callable[[Mapping[str, Any]], Awaitable[str]]
Predicate = Callable[[str], Any]
Validator = re.Pattern[str] | Predicate
Sanitizer = Callable[[str, dict[str, Any]], Any]


@dataclass(frozen=True)
class StaticDefault:
    """A default known when the field is declared."""

    value: str = ""


@dataclass(frozen=True)
class DynamicDefault:
    """A default computed asynchronously from earlier answers."""

    resolve: DefaultFn


Default = StaticDefault | DynamicDefault


@dataclass(frozen=True)
class FieldDescriptor:
    """Declarative description of a prompted field.

    Attributes:
        name: Key of the answer in the result set; unique per catalog.
        message: Question shown to the user.
        default: Static value or async resolver for the suggested answer.
        validator: Compiled pattern (``search`` semantics) or predicate.
        warning: Shown when the validator rejects an answer.
        sanitize: ``(raw, answers) -> value`` applied after confirmation.
    """

    name: str
    message: str
    default: Default = StaticDefault()
    validator: Validator | None = None
    warning: str | None = None
    sanitize: Sanitizer | None = None

    @property
    def warning_text(self) -> str:
        return self.warning or f"Invalid input for {self.name}."

    def accepts(self, value: str) -> bool:
        """Return True if *value* passes this field's validator (if any)."""
        if self.validator is None:
            return True
        if isinstance(self.validator, re.Pattern):
            return self.validator.search(value) is not None
        return bool(self.validator(value))

    def with_default(self, value: str) -> FieldDescriptor:
        """Copy of this descriptor with a static default of *value*."""
        return replace(self, default=StaticDefault(value))


def static(value: Any) -> StaticDefault:
    """Shorthand for ``StaticDefault(str(value))``."""
    return StaticDefault(str(value))


def dynamic(fn: DefaultFn) -> DynamicDefault:
    """Shorthand for ``DynamicDefault(fn)``; usable as a decorator."""
    return DynamicDefault(fn)
