"""
MiniShell IPC Module

Provides the anonymous pipe used by pipelines.
"""

from .pipe import Pipe

__all__ = [
    'Pipe',
]
