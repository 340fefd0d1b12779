"""PromptSession — ask a catalog of fields in order, then confirm.

State machine::

    IDLE -> ASKING_FIELD(i) -> VALIDATING(i) -> ASKING_FIELD(i+1) ...
         -> ASKING_CONFIRMATION -> CONFIRMING -> COMPLETE
                                              -> RESETTING_DEFAULTS -> ASKING_FIELD(0)

Each field's default is resolved right before it is asked, from the
answers given so far in the current pass, so later defaults can build on
earlier answers. A rejected answer re-asks the same field. Declining the
confirmation restarts from the first field with every default set to the
answer just given. Sanitizers run once, on the accepted pass only.

INVARIANT: Only :class:`SessionAbortError` leaves :meth:`PromptSession.run`.
"""

from __future__ import annotations

import asyncio
import logging
import re
from enum import StrEnum
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Protocol

from skelctl.infrastructure.terminal import PromptStyle
from skelctl.services.finalize import AnswerFinalizer
from skelctl.services.resolver import DefaultResolver

if TYPE_CHECKING:
    from collections.abc import Mapping

    from skelctl.domain.catalog import PropertyCatalog
    from skelctl.domain.fields import FieldDescriptor

logger = logging.getLogger(__name__)

CONFIRM_MESSAGE = "Are these answers correct?"
CONFIRM_DEFAULT = "Y/n"

# Any "y" anywhere counts as yes: "Y", "yes", and the untouched "Y/n".
_AFFIRMATIVE = re.compile(r"y", re.IGNORECASE)


def is_affirmative(answer: str | None) -> bool:
    """Return True if the confirmation *answer* accepts the result set."""
    return bool(answer) and _AFFIRMATIVE.search(answer) is not None


class SessionState(StrEnum):
    IDLE = "idle"
    ASKING_FIELD = "asking_field"
    VALIDATING = "validating"
    ASKING_CONFIRMATION = "asking_confirmation"
    CONFIRMING = "confirming"
    RESETTING_DEFAULTS = "resetting_defaults"
    COMPLETE = "complete"


class SessionAbortError(Exception):
    """The session failed; no result set was produced."""


class PromptIO(Protocol):
    """The interactive device a session talks to."""

    def banner(self, text: str) -> None: ...

    def warn(self, text: str) -> None: ...

    async def ask(self, label: str, default: str) -> str:
        """Show *label* and *default*; return the answer (default on empty input)."""
        ...


class PromptSession:
    """One ask-all-then-confirm cycle over a :class:`PropertyCatalog`.

    Args:
        catalog: Fields to ask, in order. Not modified by the session.
        io: Prompt device (terminal, defaults-only, or a test script).
        style: Prompt decoration, built once by the caller.
        resolver: Default resolver; a plain :class:`DefaultResolver` if omitted.
        overrides: Operator defaults by field name, applied on the first pass.
    """

    def __init__(
        self,
        catalog: PropertyCatalog,
        *,
        io: PromptIO,
        style: PromptStyle | None = None,
        resolver: DefaultResolver | None = None,
        overrides: Mapping[str, Any] | None = None,
    ) -> None:
        self._fields: list[FieldDescriptor] = list(catalog)
        self._io = io
        self._style = style or PromptStyle()
        self._resolver = resolver or DefaultResolver()
        self._overrides = dict(overrides or {})
        self._finalizer = AnswerFinalizer(self._fields)
        self.state = SessionState.IDLE
        self.passes = 0

    @property
    def fields(self) -> list[FieldDescriptor]:
        """Working descriptors; defaults change after a declined confirmation."""
        return list(self._fields)

    def collect(self) -> dict[str, Any]:
        """Run the session on a fresh event loop and return the final answers."""
        return asyncio.run(self.run())

    async def run(self) -> dict[str, Any]:
        """Drive the session to completion and return the finalized answers."""
        if self.state is not SessionState.IDLE:
            msg = f"Session already started (state={self.state})"
            raise SessionAbortError(msg)
        try:
            return await self._drive()
        except SessionAbortError:
            raise
        except Exception as exc:
            logger.debug("session aborted in state %s", self.state, exc_info=True)
            msg = f"Prompt session aborted: {exc}"
            raise SessionAbortError(msg) from exc

    async def _drive(self) -> dict[str, Any]:
        overrides: Mapping[str, Any] | None = self._overrides
        answers: dict[str, str] = {}
        index = 0
        default: str | None = None
        raw = ""
        confirmation = ""
        self._begin_pass()

        while True:
            match self.state:
                case SessionState.ASKING_FIELD:
                    field = self._fields[index]
                    if default is None:
                        snapshot = MappingProxyType(dict(answers))
                        default = await self._resolver.resolve(field, snapshot, overrides)
                    raw = await self._io.ask(self._style.label(field.message), default)
                    if raw == "":
                        raw = default
                    self.state = SessionState.VALIDATING

                case SessionState.VALIDATING:
                    field = self._fields[index]
                    if not field.accepts(raw):
                        logger.debug("rejected %r for %s", raw, field.name)
                        self._io.warn(self._style.warning_text(field.warning_text))
                        self.state = SessionState.ASKING_FIELD
                        continue
                    answers[field.name] = raw
                    index += 1
                    default = None
                    self.state = (
                        SessionState.ASKING_FIELD
                        if index < len(self._fields)
                        else SessionState.ASKING_CONFIRMATION
                    )

                case SessionState.ASKING_CONFIRMATION:
                    label = self._style.label(CONFIRM_MESSAGE, confirm=True)
                    confirmation = await self._io.ask(label, CONFIRM_DEFAULT)
                    self.state = SessionState.CONFIRMING

                case SessionState.CONFIRMING:
                    if is_affirmative(confirmation or CONFIRM_DEFAULT):
                        result = self._finalizer.finalize(answers)
                        self.state = SessionState.COMPLETE
                        logger.debug("session complete after %d pass(es)", self.passes)
                        return result
                    self.state = SessionState.RESETTING_DEFAULTS

                case SessionState.RESETTING_DEFAULTS:
                    self._fields = [f.with_default(answers[f.name]) for f in self._fields]
                    # Carried-over answers take precedence over operator defaults.
                    overrides = None
                    answers = {}
                    index = 0
                    self._begin_pass()

                case _:
                    msg = f"Unexpected session state: {self.state}"
                    raise SessionAbortError(msg)

    def _begin_pass(self) -> None:
        self.passes += 1
        logger.debug("starting prompt pass %d over %d field(s)", self.passes, len(self._fields))
        self._io.banner(self._style.banner_text())
        self.state = SessionState.ASKING_FIELD if self._fields else SessionState.ASKING_CONFIRMATION
