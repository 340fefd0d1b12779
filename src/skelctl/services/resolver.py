"""DefaultResolver — compute the suggested answer for one field.

Precedence: operator override, then a static default, then the field's
dynamic resolver. A resolver that fails in an expected way (a
:class:`ResolverError` or a failed external command) yields the
placeholder ``"???"`` so the user can still type over it. Anything else
propagates and ends the session.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from skelctl.domain.fields import DynamicDefault, FieldDescriptor
from skelctl.infrastructure.process import ExternalCommandError

logger = logging.getLogger(__name__)

UNRESOLVED_DEFAULT = "???"


class ResolverError(Exception):
    """A dynamic default could not be computed."""


class DefaultResolver:
    """Resolves field defaults one at a time, in the order they are asked."""

    async def resolve(
        self,
        descriptor: FieldDescriptor,
        answers: Mapping[str, Any],
        overrides: Mapping[str, Any] | None = None,
    ) -> str:
        """Return the effective default for *descriptor*.

        Args:
            descriptor: The field about to be asked.
            answers: Answers given so far in this pass (earlier fields only).
            overrides: Operator-supplied defaults keyed by field name.
        """
        if overrides and descriptor.name in overrides:
            return str(overrides[descriptor.name])

        default = descriptor.default
        if not isinstance(default, DynamicDefault):
            return default.value

        try:
            value = await default.resolve(answers)
        except (ResolverError, ExternalCommandError) as exc:
            logger.debug("default for %s unresolved: %s", descriptor.name, exc)
            return UNRESOLVED_DEFAULT
        return str(value)
