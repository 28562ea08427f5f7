"""Built-in pipeline steps."""

from .base import Payload, Step, StepError
from .registry import StepRegistry, build_registry

__all__ = ["Payload", "Step", "StepError", "StepRegistry", "build_registry"]
