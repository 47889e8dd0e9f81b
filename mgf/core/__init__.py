"""Core types: results, exit codes and run configuration."""

from .config import (
    BranchingModel,
    CommitMessages,
    ConfigError,
    FileConfig,
    PipelineConfig,
    ReleaseFiles,
    load_file_config,
    load_file_config_or_default,
)
from .errors import ErrorCode
from .result import Err, Ok, Result

__all__ = [
    # config
    "BranchingModel",
    "CommitMessages",
    "ConfigError",
    "FileConfig",
    "PipelineConfig",
    "ReleaseFiles",
    "load_file_config",
    "load_file_config_or_default",
    # errors
    "ErrorCode",
    # result
    "Err",
    "Ok",
    "Result",
]
