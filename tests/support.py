"""
Shared fixtures for the engine tests.

Author: YSNRFD
Version: 1.0.0
"""

import os
import shutil
import tempfile
import unittest

from minishell.core.config_loader import ConfigLoader
from minishell.logger import Logger


def open_descriptors() -> set:
    """Descriptors currently open in this process (Linux only)."""
    return set(os.listdir('/proc/self/fd'))


def fd_identity(fd: int) -> tuple:
    """Device and inode behind ``fd``."""
    st = os.fstat(fd)
    return (st.st_dev, st.st_ino)


class EngineTestCase(unittest.TestCase):
    """Runs every test in a scratch directory with default configuration."""

    def setUp(self):
        ConfigLoader().reset()
        Logger.reset()
        self._old_cwd = os.getcwd()
        self.tmpdir = os.path.realpath(tempfile.mkdtemp(prefix='minishell-'))
        os.chdir(self.tmpdir)

    def tearDown(self):
        os.chdir(self._old_cwd)
        shutil.rmtree(self.tmpdir, ignore_errors=True)
        ConfigLoader().reset()
        Logger.reset()

    def path(self, name: str) -> str:
        return os.path.join(self.tmpdir, name)

    def read(self, name: str) -> str:
        with open(self.path(name), 'r', encoding='utf-8') as f:
            return f.read()

    def write(self, name: str, content: str) -> None:
        with open(self.path(name), 'w', encoding='utf-8') as f:
            f.write(content)
