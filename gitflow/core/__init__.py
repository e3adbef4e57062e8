"""Core domain types: results, exit codes and configuration."""

from .config import Config, ConfigError, LoadedConfig, load_config, load_config_from_dir
from .errors import ErrorCode
from .result import Err, Ok, Result, is_err, is_ok

__all__ = [
    # config
    "Config",
    "ConfigError",
    "LoadedConfig",
    "load_config",
    "load_config_from_dir",
    # errors
    "ErrorCode",
    # result
    "Err",
    "Ok",
    "Result",
    "is_err",
    "is_ok",
]
