"""Typed loading of pipeline files.

A pipeline file is YAML with a single ``workflows`` list:

    workflows:
      - type: http
        parameters:
          url: https://example.com
          method: GET
      - type: echo
        parameters:
          text: "status=${input.status_code}"
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_list, get_str, scalar_to_str

__all__ = [
    "ConfigError",
    "StepConfig",
    "PipelineConfig",
    "parse_config",
    "load_config",
    "http_timeout",
    "DEFAULT_HTTP_TIMEOUT",
]

DEFAULT_HTTP_TIMEOUT = 30.0
HTTP_TIMEOUT_ENV = "WORKFLOWS_HTTP_TIMEOUT"


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when a pipeline file cannot be loaded or parsed."""

    message: str
    path: Path | None = None

    def __str__(self) -> str:
        if self.path is not None:
            return f"{self.path}: {self.message}"
        return self.message


@dataclass(frozen=True, slots=True)
class StepConfig:
    """One entry of the ``workflows`` list.

    Attributes:
        type: Step type name as written in the file (matched case-insensitively)
        parameters: Raw parameter values, templates not yet resolved
    """

    type: str
    parameters: dict[str, str] = field(default_factory=dict[str, str])


@dataclass(frozen=True, slots=True)
class PipelineConfig:
    """Ordered list of steps to run."""

    steps: tuple[StepConfig, ...] = ()

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Result[PipelineConfig, str]:
        """Build from a parsed YAML mapping, reporting the first shape problem."""
        entries = get_list(data, "workflows")
        if entries is None:
            return Err("'workflows' must be a list of steps")

        steps: list[StepConfig] = []
        for index, entry in enumerate(entries):
            result = _parse_step(index, entry)
            if isinstance(result, Err):
                return result
            steps.append(result.value)
        return Ok(cls(steps=tuple(steps)))


def _parse_step(index: int, entry: object) -> Result[StepConfig, str]:
    where = f"workflows[{index}]"
    table = as_str_dict(entry)
    if table is None:
        return Err(f"{where} must be a mapping")

    step_type = get_str(table, "type")
    if step_type is None:
        return Err(f"{where}.type must be a non-empty string")

    raw = table.get("parameters")
    if raw is None:
        return Ok(StepConfig(type=step_type))

    params: StrDict | None = as_str_dict(raw)
    if params is None:
        return Err(f"{where}.parameters must be a mapping")

    parameters: dict[str, str] = {}
    for key, value in params.items():
        text = scalar_to_str(value)
        if text is None:
            return Err(f"{where}.parameters.{key} must be a scalar value")
        parameters[key] = text
    return Ok(StepConfig(type=step_type, parameters=parameters))


def parse_config(text: str, path: Path | None = None) -> Result[PipelineConfig, ConfigError]:
    """Parse pipeline YAML from a string."""
    try:
        data_obj: object = yaml.safe_load(text)
    except yaml.YAMLError as e:
        return Err(ConfigError(f"Invalid YAML: {e}", path=path))

    data = as_str_dict(data_obj)
    if data is None:
        return Err(ConfigError("Pipeline root must be a mapping", path=path))

    result = PipelineConfig.from_dict(data)
    if isinstance(result, Err):
        return Err(ConfigError(result.error, path=path))
    return result


def load_config(path: Path) -> Result[PipelineConfig, ConfigError]:
    """Load and parse a pipeline file.

    Args:
        path: Path to the YAML pipeline

    Returns:
        Ok(PipelineConfig) on success, Err(ConfigError) on failure
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return Err(ConfigError(f"Pipeline file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except IsADirectoryError:
        return Err(ConfigError(f"Expected a file, got a directory: {path}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading pipeline: {e}", path=path))

    return parse_config(text, path=path)


def http_timeout(env: Mapping[str, str] | None = None) -> float:
    """HTTP timeout in seconds, overridable with WORKFLOWS_HTTP_TIMEOUT."""
    source = os.environ if env is None else env
    raw = source.get(HTTP_TIMEOUT_ENV, "").strip()
    if not raw:
        return DEFAULT_HTTP_TIMEOUT
    try:
        value = float(raw)
    except ValueError:
        return DEFAULT_HTTP_TIMEOUT
    return value if value > 0 else DEFAULT_HTTP_TIMEOUT
