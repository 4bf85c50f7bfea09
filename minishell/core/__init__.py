"""
MiniShell Core Module

Core engine components:
- Configuration Loader
"""

from .config_loader import (
    ConfigLoader,
    Config,
    EngineConfig,
    ProcessConfig,
    RedirectionConfig,
    LoggingConfig,
    get_config,
)

__all__ = [
    'ConfigLoader',
    'Config',
    'EngineConfig',
    'ProcessConfig',
    'RedirectionConfig',
    'LoggingConfig',
    'get_config',
]
