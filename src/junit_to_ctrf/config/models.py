from __future__ import annotations

from typing import Iterable

from pydantic import BaseModel, ConfigDict, Field, field_validator


def parse_env_props(props: Iterable[object]) -> dict[str, str]:
    """Turn ``key=value`` entries into a mapping; later duplicates win."""
    env: dict[str, str] = {}
    for entry in props:
        if not isinstance(entry, str) or "=" not in entry:
            raise ValueError(f"Environment property must be key=value: {entry!r}")
        key, value = entry.split("=", 1)
        key = key.strip()
        if not key:
            raise ValueError(f"Environment property has an empty key: {entry!r}")
        env[key] = value
    return env


class ConvertOptions(BaseModel):
    output_path: str | None = None
    tool_name: str | None = None
    env: dict[str, str] = Field(default_factory=dict)
    use_suite_name: bool = False
    log: bool = False

    model_config = ConfigDict(extra="forbid")

    @field_validator("env", mode="before")
    @classmethod
    def _parse_env(cls, value: object) -> object:
        if isinstance(value, (list, tuple)):
            return parse_env_props(value)
        if value is None:
            return {}
        return value
