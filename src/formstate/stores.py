"""Canonical value and error stores for a form.

Both stores are plain mappings keyed by field name. Reads address fields
through a NamePath and come back in one of three shapes:
- ALL: a copy of the whole mapping
- SINGLE: the slot's value (None when the slot is missing)
- MANY: a sub-mapping restricted to the names that resolved
"""

from collections.abc import Mapping, Sequence
from typing import Any

from formstate.name_path import NamePath, NamePathLike, PathKind, resolve
from formstate.types import FieldError


class _KeyedStore:
    """Shared read/purge behaviour for the value and error stores."""

    def __init__(self) -> None:
        self._data: dict[str, Any] = {}

    def select(self, path: NamePathLike, registered: Sequence[str]) -> Any:
        path = NamePath.coerce(path)

        if path.is_single:
            return self._data.get(path.key)

        if path.kind is PathKind.ALL:
            return dict(self._data)

        return {name: self._data.get(name) for name in resolve(path, registered)}

    def snapshot(self) -> dict[str, Any]:
        return dict(self._data)

    def discard(self, name: str) -> None:
        """Drop the slot for ``name``. Missing slots are ignored."""
        self._data.pop(name, None)

    def __contains__(self, name: object) -> bool:
        return name in self._data

    def __len__(self) -> int:
        return len(self._data)


class ValueStore(_KeyedStore):
    """Field name -> current value.

    Writes merge: keys not present in a write are never removed by it.
    """

    def merge(self, values: Mapping[str, Any]) -> dict[str, Any]:
        """Merge ``values`` into the store and return the merged snapshot."""
        self._data.update(values)
        return self.snapshot()

    def get(self, name: str) -> Any:
        return self._data.get(name)


class ErrorStore(_KeyedStore):
    """Field name -> last recorded FieldError (None means no recorded error)."""

    def set(self, name: str, error: FieldError | None) -> None:
        """Overwrite the slot for ``name``."""
        self._data[name] = error

    def get(self, name: str) -> FieldError | None:
        return self._data.get(name)

    def has_errors(self) -> bool:
        return any(error is not None for error in self._data.values())
