"""
Built-in Command Tests

Run with: python -m pytest tests/test_builtins.py -v

Author: YSNRFD
Version: 1.0.0
"""

import os
import unittest
from unittest import mock

from support import EngineTestCase, fd_identity, open_descriptors

from minishell.process.status import SHELL_EXIT
from minishell.shell.builtins import BuiltinCommands
from minishell.shell.command import CompositeCommand, Operator, simple
from minishell.shell.evaluator import CommandEvaluator


class TestBuiltinTable(unittest.TestCase):
    """Test which names are built-in."""

    def test_known_names(self):
        """Test cd, exit and quit are built-in, nothing else."""
        builtins = BuiltinCommands()
        for name in ('cd', 'exit', 'quit'):
            self.assertTrue(builtins.is_builtin(name))
        for name in ('ls', 'echo', 'pwd', ''):
            self.assertFalse(builtins.is_builtin(name))

    def test_exit_never_forks(self):
        """Test exit runs in the engine itself."""
        builtins = BuiltinCommands()
        with mock.patch('os.fork') as fork:
            self.assertEqual(builtins.execute('exit', simple('exit')), SHELL_EXIT)
            self.assertEqual(builtins.execute('quit', simple('quit', '3')), SHELL_EXIT)
        fork.assert_not_called()

    def test_unknown_name(self):
        """Test executing a name that is not built-in is an error."""
        with self.assertRaises(KeyError):
            BuiltinCommands().execute('ls', simple('ls'))


class TestChangeDirectory(EngineTestCase):
    """Test the cd built-in."""

    def setUp(self):
        super().setUp()
        self.evaluator = CommandEvaluator()
        os.mkdir(self.path('sub'))

    def test_cd_success(self):
        """Test cd to a directory returns 0 and moves the engine."""
        with mock.patch('os.fork') as fork:
            status = self.evaluator.execute(simple('cd', 'sub'))
        self.assertEqual(status, 0)
        self.assertEqual(os.getcwd(), self.path('sub'))
        fork.assert_not_called()

    def test_cd_failure(self):
        """Test cd to a missing directory returns non-zero and stays put."""
        status = self.evaluator.execute(simple('cd', 'nowhere', error='err.txt'))
        self.assertNotEqual(status, 0)
        self.assertEqual(os.getcwd(), self.tmpdir)
        self.assertEqual(self.read('err.txt'), 'cd: nowhere: No such file or directory\n')

    def test_cd_to_file(self):
        """Test cd to a regular file fails."""
        self.write('plain.txt', '')
        self.assertEqual(self.evaluator.execute(simple('cd', 'plain.txt', error='e')), 1)
        self.assertEqual(os.getcwd(), self.tmpdir)

    def test_cd_home(self):
        """Test cd without an argument goes to HOME."""
        with mock.patch.dict(os.environ, {'HOME': self.path('sub')}):
            self.assertEqual(self.evaluator.execute(simple('cd')), 0)
        self.assertEqual(os.getcwd(), self.path('sub'))

    def test_cd_without_home(self):
        """Test cd without an argument fails when HOME is unset."""
        with mock.patch.dict(os.environ, clear=True):
            self.assertEqual(self.evaluator.execute(simple('cd', error='err.txt')), 1)
        self.assertEqual(self.read('err.txt'), 'cd: HOME not set\n')

    def test_cd_unresolvable_argument(self):
        """Test cd with an argument the resolver rejects fails."""
        def resolver(word):
            return None if word.text == '$NOPE' else word.text

        evaluator = CommandEvaluator(resolver=resolver)
        self.assertEqual(evaluator.execute(simple('cd', '$NOPE', error='e')), 1)
        self.assertEqual(os.getcwd(), self.tmpdir)

    def test_cd_then_command(self):
        """Test the next command of a sequence runs in the new directory."""
        tree = CompositeCommand(Operator.SEQUENTIAL, simple('cd', 'sub'), simple('touch', 'here'))
        self.assertEqual(self.evaluator.execute(tree), 0)
        self.assertTrue(os.path.exists(self.path('sub/here')))

    def test_redirections_created_and_reverted(self):
        """Test cd > file creates the file but leaves the engine's streams alone."""
        self.write('out.txt', 'previous\n')
        stdout_before = fd_identity(1)
        stderr_before = fd_identity(2)
        open_before = open_descriptors()

        status = self.evaluator.execute(simple('cd', 'sub', output='out.txt', error='err.txt'))

        self.assertEqual(status, 0)
        self.assertEqual(self.read('out.txt'), '')
        self.assertTrue(os.path.exists(self.path('err.txt')))
        self.assertEqual(fd_identity(1), stdout_before)
        self.assertEqual(fd_identity(2), stderr_before)
        self.assertEqual(open_descriptors(), open_before)

    def test_redirections_reverted_on_failure(self):
        """Test descriptors come back after a failing cd as well."""
        stdout_before = fd_identity(1)
        stderr_before = fd_identity(2)
        open_before = open_descriptors()

        status = self.evaluator.execute(simple('cd', 'nowhere', output='o.txt', error='e.txt'))

        self.assertEqual(status, 1)
        self.assertEqual(fd_identity(1), stdout_before)
        self.assertEqual(fd_identity(2), stderr_before)
        self.assertEqual(open_descriptors(), open_before)

    def test_strict_redirection_failure(self):
        """Test a strict redirection failure fails cd without moving."""
        from minishell.core.config_loader import ConfigLoader

        ConfigLoader().set('redirection.strict', True)
        evaluator = CommandEvaluator()
        status = evaluator.execute(simple('cd', 'sub', output='missing/dir/out.txt'))
        self.assertEqual(status, 1)
        self.assertEqual(os.getcwd(), self.tmpdir)


if __name__ == '__main__':
    unittest.main()
