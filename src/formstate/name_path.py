"""Name path addressing for the formstate public API.

Every public operation that addresses fields accepts one of three shapes:
nothing (all registered fields), a single key, or a list of keys. The shape
is captured once as a NamePath and resolved against the registered names.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Union


class PathKind(Enum):
    """Which addressing shape a NamePath carries."""

    ALL = "all"
    SINGLE = "single"
    MANY = "many"


@dataclass(frozen=True)
class NamePath:
    """Tagged union over absent / single key / list of keys."""

    kind: PathKind
    names: tuple[str, ...] = ()

    @classmethod
    def all(cls) -> "NamePath":
        return cls(PathKind.ALL)

    @classmethod
    def single(cls, name: str) -> "NamePath":
        return cls(PathKind.SINGLE, (name,))

    @classmethod
    def many(cls, names: Iterable[str]) -> "NamePath":
        return cls(PathKind.MANY, tuple(names))

    @classmethod
    def coerce(cls, value: "NamePathLike") -> "NamePath":
        """Normalize a caller-supplied name argument into a NamePath.

        None maps to ALL, a list or tuple to MANY, and anything else is
        treated as a single key.
        """
        if isinstance(value, NamePath):
            return value
        if value is None:
            return cls.all()
        if isinstance(value, (list, tuple)):
            return cls.many(value)
        return cls.single(value)

    @property
    def is_single(self) -> bool:
        return self.kind is PathKind.SINGLE

    @property
    def key(self) -> str | None:
        """The addressed key for SINGLE paths, None otherwise."""
        return self.names[0] if self.is_single else None


NamePathLike = Union[NamePath, str, Sequence[str], None]


def resolve(path: "NamePathLike", registered: Sequence[str]) -> list[str]:
    """Resolve a name path against the currently registered names.

    Args:
        path: The name path (or a raw value accepted by NamePath.coerce)
        registered: Registered field names, in registry order

    Returns:
        ALL: every registered name, in registry order.
        SINGLE: the key itself, whether or not it is registered.
        MANY: the keys that are registered, in input order.
    """
    path = NamePath.coerce(path)

    if path.kind is PathKind.ALL:
        return list(registered)

    if path.kind is PathKind.SINGLE:
        return list(path.names)

    known = set(registered)
    return [name for name in path.names if name in known]
