"""Form engine configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def _env_flag(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ValueError(f"{name} must be a boolean flag, got {raw!r}")


@dataclass
class FormConfig:
    """Engine-wide defaults.

    Attributes:
        validate_on_change: Default for set_fields_value(validate=...)
        validate_first: Default ValidateFirst for descriptors loaded from dicts
    """

    validate_on_change: bool = True
    validate_first: bool = False

    @classmethod
    def from_env(cls) -> FormConfig:
        """Create config from environment variables.

        FORMSTATE_VALIDATE_ON_CHANGE and FORMSTATE_VALIDATE_FIRST accept
        1/0, true/false, yes/no, on/off. Unset variables keep the defaults.
        """
        return cls(
            validate_on_change=_env_flag("FORMSTATE_VALIDATE_ON_CHANGE", True),
            validate_first=_env_flag("FORMSTATE_VALIDATE_FIRST", False),
        )
