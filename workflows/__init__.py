"""Run YAML-defined chains of automation steps."""

__version__ = "1.0.0"

USER_AGENT = "workflows/1.0"
