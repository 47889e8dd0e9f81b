"""Platform abstraction layer."""

from .process import (
    ProcessError,
    ProcessGateway,
    ToolGateway,
    missing_tools,
    run,
    run_streaming,
)

__all__ = [
    "ProcessError",
    "ProcessGateway",
    "ToolGateway",
    "missing_tools",
    "run",
    "run_streaming",
]
