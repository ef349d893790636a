from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from .models import ConvertOptions, parse_env_props


def _load_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {path}") from exc
    except OSError as exc:
        raise FileNotFoundError(f"Unable to read {path}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Expected a YAML mapping in {path}")
    return data


def load_options(path: Path) -> ConvertOptions:
    if not path.is_file():
        raise FileNotFoundError(f"Config file not found: {path}")
    data = _load_yaml(path)
    output_path = data.get("output_path")
    if isinstance(output_path, str) and not Path(output_path).is_absolute():
        data["output_path"] = str((path.parent / output_path).resolve())
    return ConvertOptions.model_validate(data)


def merge_options(
    base: ConvertOptions,
    *,
    env: list[str] | None = None,
    **overrides: Any,
) -> ConvertOptions:
    """Apply command line values over ``base``; ``None`` means "not given"."""
    data = base.model_dump()
    data.update({key: value for key, value in overrides.items() if value is not None})
    if env:
        data["env"] = {**base.env, **parse_env_props(env)}
    return ConvertOptions.model_validate(data)
