"""Build settings loaded from YAML."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping

import yaml

from styletokens.core.formatter import SANITIZE_POLICIES, SanitizePolicy
from styletokens.errors import ErrorCode, StyleTokensError

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class TokenSettings:
    """Wraps a settings mapping for token dictionary builds."""

    def __init__(self, values: Mapping[str, Any] | None = None) -> None:
        self._values: dict[str, Any] = dict(values or {})

    @classmethod
    def from_file(cls, path: Path) -> TokenSettings:
        if not path.exists():
            raise StyleTokensError(ErrorCode.CONFIG_MISSING, path=path)
        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, yaml.YAMLError) as exc:
            raise StyleTokensError(
                ErrorCode.CONFIG_INVALID,
                path=path,
                details={"original": str(exc)},
            ) from exc
        if data is None:
            data = {}
        if not isinstance(data, Mapping):
            raise StyleTokensError(
                ErrorCode.CONFIG_INVALID,
                message="Settings file must contain a mapping.",
                path=path,
            )
        return cls(data)

    # -- formatting --

    @property
    def prefix(self) -> str:
        raw = self._values.get("prefix", self._values.get("css_vars_prefix", ""))
        return _clean_prefix(raw)

    @prefix.setter
    def prefix(self, value: str) -> None:
        self._values.pop("css_vars_prefix", None)
        self._values["prefix"] = _clean_prefix(value)

    @property
    def css_vars_root(self) -> str:
        raw = self._values.get("css_vars_root", ":root")
        value = raw.strip() if isinstance(raw, str) else ""
        return value or ":root"

    @css_vars_root.setter
    def css_vars_root(self, value: str) -> None:
        self._values["css_vars_root"] = (value or "").strip() or ":root"

    @property
    def sanitize_policy(self) -> SanitizePolicy:
        raw = self._values.get("sanitize_policy", "escape")
        policy = raw.strip().lower() if isinstance(raw, str) else ""
        if policy in SANITIZE_POLICIES:
            return policy  # type: ignore[return-value]
        return "escape"

    @sanitize_policy.setter
    def sanitize_policy(self, value: str) -> None:
        policy = (value or "").strip().lower()
        if policy not in SANITIZE_POLICIES:
            joined = ", ".join(SANITIZE_POLICIES)
            raise StyleTokensError(
                ErrorCode.CONFIG_INVALID,
                message=f"sanitize_policy must be one of {joined}, got {value!r}",
            )
        self._values["sanitize_policy"] = policy

    # -- palettes --

    @property
    def default_palette(self) -> str:
        raw = self._values.get("default_palette", "")
        return raw.strip() if isinstance(raw, str) else ""

    @default_palette.setter
    def default_palette(self, value: str) -> None:
        self._values["default_palette"] = (value or "").strip()

    @property
    def palette_scopes(self) -> list[str]:
        raw = self._values.get("palette_scopes", [])
        if not isinstance(raw, (list, tuple)):
            return []
        return [item.strip() for item in raw if isinstance(item, str) and item.strip()]

    @palette_scopes.setter
    def palette_scopes(self, value: list[str]) -> None:
        self._values["palette_scopes"] = [item.strip() for item in value if isinstance(item, str)]

    # -- logging --

    @property
    def log_level(self) -> str:
        raw = self._values.get("log_level", "WARNING")
        level = raw.strip().upper() if isinstance(raw, str) else ""
        if level in _LOG_LEVELS:
            return level
        return "WARNING"

    @log_level.setter
    def log_level(self, value: str) -> None:
        level = (value or "").strip().upper()
        if level not in _LOG_LEVELS:
            level = "WARNING"
        self._values["log_level"] = level

    @property
    def log_file(self) -> str:
        raw = self._values.get("log_file", "")
        return raw.strip() if isinstance(raw, str) else ""

    @log_file.setter
    def log_file(self, value: str) -> None:
        self._values["log_file"] = (value or "").strip()

    # -- helpers --

    def to_dict(self) -> dict[str, Any]:
        return {
            "prefix": self.prefix,
            "css_vars_root": self.css_vars_root,
            "sanitize_policy": self.sanitize_policy,
            "default_palette": self.default_palette,
            "palette_scopes": self.palette_scopes,
            "log_level": self.log_level,
            "log_file": self.log_file,
        }

    def save(self, path: Path) -> Path:
        """Write the cleaned settings as YAML and return the path."""
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(yaml.dump(self.to_dict(), default_flow_style=False), encoding="utf-8")
        return path


def _clean_prefix(value: object) -> str:
    if not isinstance(value, str):
        return ""
    return value.strip().strip("-")
