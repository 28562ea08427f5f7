"""Core types: results, exit codes, pipeline config and templates."""

from .config import ConfigError, PipelineConfig, StepConfig, load_config, parse_config
from .context import Context
from .errors import ErrorCode
from .result import Err, Ok, Result, is_err, is_ok
from .template import TemplateError, fulfill

__all__ = [
    # config
    "ConfigError",
    "PipelineConfig",
    "StepConfig",
    "load_config",
    "parse_config",
    # context
    "Context",
    # errors
    "ErrorCode",
    # result
    "Err",
    "Ok",
    "Result",
    "is_err",
    "is_ok",
    # template
    "TemplateError",
    "fulfill",
]
