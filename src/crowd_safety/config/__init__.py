"""
Configuration loading and validation.

- load_config: Find, read and validate a YAML config (with env overrides)
- load_config_with_env: Apply environment variable overrides

Pydantic schemas available for type-safe validation:
- Config: Complete configuration schema
- AnalyzerConfig: Thresholds and bounds for one analyzer
"""

from .loader import (
    ConfigValidationError,
    find_config_file,
    load_config,
    load_config_with_env,
)
from .schemas import (
    AnalyzerConfig,
    Config,
    LoggingConfig,
    validate_config_pydantic,
)

__all__ = [
    "AnalyzerConfig",
    "Config",
    # Exception
    "ConfigValidationError",
    "LoggingConfig",
    "find_config_file",
    # Config loading
    "load_config",
    "load_config_with_env",
    "validate_config_pydantic",
]
