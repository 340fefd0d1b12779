"""PropertyCatalog — the ordered list of fields asked in a session.

INVARIANT: Declaration order is prompt order. Names are unique, and the
confirmation field is never part of a catalog.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from skelctl.domain.fields import CONFIRM_FIELD, FieldDescriptor


class PropertyCatalog:
    """Ordered, name-unique collection of :class:`FieldDescriptor`."""

    def __init__(self, fields: Iterable[FieldDescriptor] = ()) -> None:
        self._fields: list[FieldDescriptor] = []
        for descriptor in fields:
            self.add(descriptor)

    def add(self, descriptor: FieldDescriptor) -> None:
        """Append *descriptor*; raises ValueError on a duplicate or reserved name."""
        if descriptor.name == CONFIRM_FIELD:
            msg = f"Field name '{CONFIRM_FIELD}' is reserved for confirmation"
            raise ValueError(msg)
        if descriptor.name in self:
            msg = f"Duplicate field name: {descriptor.name}"
            raise ValueError(msg)
        self._fields.append(descriptor)

    def names(self) -> list[str]:
        return [f.name for f in self._fields]

    def get(self, name: str) -> FieldDescriptor:
        for descriptor in self._fields:
            if descriptor.name == name:
                return descriptor
        raise KeyError(name)

    def copy(self) -> PropertyCatalog:
        return PropertyCatalog(self._fields)

    def __contains__(self, name: object) -> bool:
        return any(f.name == name for f in self._fields)

    def __iter__(self) -> Iterator[FieldDescriptor]:
        return iter(list(self._fields))

    def __len__(self) -> int:
        return len(self._fields)

    def __getitem__(self, index: int) -> FieldDescriptor:
        return self._fields[index]

    def __repr__(self) -> str:
        return f"PropertyCatalog({self.names()!r})"
