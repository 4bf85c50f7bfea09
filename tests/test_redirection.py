"""
Redirection Tests

Run with: python -m pytest tests/test_redirection.py -v

Author: YSNRFD
Version: 1.0.0
"""

import os
import unittest

from support import EngineTestCase, fd_identity, open_descriptors

from minishell.core.config_loader import ConfigLoader
from minishell.exceptions import RedirectionError
from minishell.shell.command import IOFlags, Word, simple
from minishell.shell.evaluator import CommandEvaluator
from minishell.shell.redirection import (
    OUTPUT_FLAGS,
    STDOUT_FILENO,
    Redirector,
    preserved_descriptors,
)


class TestRedirector(EngineTestCase):
    """Test the Redirector in the test process itself."""

    def test_missing_target_is_noop(self):
        """Test a None word leaves the descriptor alone."""
        redirector = Redirector()
        before = fd_identity(STDOUT_FILENO)
        self.assertFalse(redirector.apply(None, STDOUT_FILENO, OUTPUT_FLAGS))
        self.assertEqual(fd_identity(STDOUT_FILENO), before)

    def test_apply_rebinds_and_closes_temporary(self):
        """Test the target is bound and no extra descriptor stays open."""
        redirector = Redirector()
        with preserved_descriptors(STDOUT_FILENO):
            before = open_descriptors()
            self.assertTrue(
                redirector.apply(Word('target.txt'), STDOUT_FILENO, OUTPUT_FLAGS | os.O_TRUNC)
            )
            self.assertEqual(open_descriptors(), before)
            os.write(STDOUT_FILENO, b'direct\n')
            bound = fd_identity(STDOUT_FILENO)
        self.assertEqual(bound, fd_identity_of_path(self.path('target.txt')))
        self.assertEqual(self.read('target.txt'), 'direct\n')

    def test_created_file_mode(self):
        """Test new targets are created with the configured mode."""
        old_umask = os.umask(0)
        try:
            redirector = Redirector(file_mode=0o600)
            with preserved_descriptors(STDOUT_FILENO):
                redirector.apply(Word('private.txt'), STDOUT_FILENO, OUTPUT_FLAGS)
        finally:
            os.umask(old_umask)
        self.assertEqual(os.stat(self.path('private.txt')).st_mode & 0o777, 0o600)

    def test_open_failure_is_ignored(self):
        """Test an unopenable target leaves the descriptor unmodified."""
        redirector = Redirector()
        before = fd_identity(STDOUT_FILENO)
        self.assertFalse(
            redirector.apply(Word('missing/dir/out.txt'), STDOUT_FILENO, OUTPUT_FLAGS)
        )
        self.assertEqual(fd_identity(STDOUT_FILENO), before)

    def test_open_failure_strict(self):
        """Test strict mode raises instead."""
        redirector = Redirector(strict=True)
        with self.assertRaises(RedirectionError) as ctx:
            redirector.apply(Word('missing/dir/out.txt'), STDOUT_FILENO, OUTPUT_FLAGS)
        self.assertEqual(ctx.exception.fd, STDOUT_FILENO)
        self.assertEqual(ctx.exception.path, 'missing/dir/out.txt')

    def test_unresolvable_target(self):
        """Test a word the resolver rejects is treated as a failed open."""
        redirector = Redirector(resolver=lambda word: None)
        self.assertFalse(redirector.apply(Word('x'), STDOUT_FILENO, OUTPUT_FLAGS))
        self.assertFalse(os.path.exists(self.path('x')))

    def test_preserved_descriptors_restores_on_error(self):
        """Test descriptors come back even when the body raises."""
        before = fd_identity(STDOUT_FILENO)
        open_before = open_descriptors()
        with self.assertRaises(RuntimeError):
            with preserved_descriptors(STDOUT_FILENO):
                Redirector().apply(Word('x.txt'), STDOUT_FILENO, OUTPUT_FLAGS)
                raise RuntimeError("boom")
        self.assertEqual(fd_identity(STDOUT_FILENO), before)
        self.assertEqual(open_descriptors(), open_before)


def fd_identity_of_path(path):
    st = os.stat(path)
    return (st.st_dev, st.st_ino)


class TestCommandRedirections(EngineTestCase):
    """Test redirections declared on commands that really run."""

    def setUp(self):
        super().setUp()
        self.evaluator = CommandEvaluator()

    def test_output_truncates(self):
        """Test > replaces existing content."""
        self.write('out.txt', 'old content that is long\n')
        self.assertEqual(self.evaluator.execute(simple('echo', 'new', output='out.txt')), 0)
        self.assertEqual(self.read('out.txt'), 'new\n')

    def test_output_append(self):
        """Test >> appends."""
        self.write('out.txt', 'old\n')
        self.evaluator.execute(simple('echo', 'new', output='out.txt', io_flags=IOFlags.OUT_APPEND))
        self.assertEqual(self.read('out.txt'), 'old\nnew\n')

    def test_error_truncates_and_appends(self):
        """Test 2> and 2>>."""
        script = 'echo oops >&2'
        self.write('err.txt', 'old\n')
        self.evaluator.execute(simple('sh', '-c', script, error='err.txt'))
        self.assertEqual(self.read('err.txt'), 'oops\n')
        self.evaluator.execute(
            simple('sh', '-c', script, error='err.txt', io_flags=IOFlags.ERR_APPEND)
        )
        self.assertEqual(self.read('err.txt'), 'oops\noops\n')

    def test_input(self):
        """Test < feeds the file to stdin."""
        self.write('in.txt', 'line one\nline two\n')
        self.evaluator.execute(simple('cat', input='in.txt', output='out.txt'))
        self.assertEqual(self.read('out.txt'), 'line one\nline two\n')

    def test_missing_input_is_not_created(self):
        """Test < does not create its target."""
        self.evaluator.execute(simple('true', input='absent.txt'))
        self.assertFalse(os.path.exists(self.path('absent.txt')))

    def test_separate_streams(self):
        """Test stdout and stderr to different files."""
        self.evaluator.execute(
            simple('sh', '-c', 'echo out; echo err >&2', output='o.txt', error='e.txt')
        )
        self.assertEqual(self.read('o.txt'), 'out\n')
        self.assertEqual(self.read('e.txt'), 'err\n')

    def test_merged_target_stdout_first(self):
        """Test one shared word keeps both streams."""
        both = Word('both.txt')
        self.write('both.txt', 'stale content\n')
        status = self.evaluator.execute(
            simple('sh', '-c', 'echo out; echo err >&2', output=both, error=both)
        )
        self.assertEqual(status, 0)
        self.assertEqual(self.read('both.txt'), 'out\nerr\n')

    def test_merged_target_stderr_first(self):
        """Test the merge holds whichever stream writes first."""
        both = Word('both.txt')
        self.evaluator.execute(
            simple('sh', '-c', 'echo err >&2; echo out; echo err2 >&2', output=both, error=both)
        )
        self.assertEqual(self.read('both.txt'), 'err\nout\nerr2\n')

    def test_equal_text_is_not_a_merge(self):
        """Test two distinct words naming one path are independent redirections."""
        status = self.evaluator.execute(
            simple('sh', '-c', 'echo out; echo err >&2', output='same.txt', error='same.txt')
        )
        self.assertEqual(status, 0)
        # stderr reopened the file at offset 0 and overwrote stdout's line
        self.assertEqual(self.read('same.txt'), 'err\n')

    def test_failed_open_still_runs(self):
        """Test an unopenable target does not abort the command."""
        status = self.evaluator.execute(
            simple('touch', 'ran', output='missing/dir/out.txt')
        )
        self.assertEqual(status, 0)
        self.assertTrue(os.path.exists(self.path('ran')))

    def test_failed_open_strict(self):
        """Test strict mode fails the command instead."""
        ConfigLoader().set('redirection.strict', True)
        evaluator = CommandEvaluator()
        status = evaluator.execute(simple('touch', 'ran', output='missing/dir/out.txt'))
        self.assertEqual(status, 1)
        self.assertFalse(os.path.exists(self.path('ran')))

    def test_targets_reopened_each_run(self):
        """Test no descriptor is cached between executions."""
        command = simple('echo', 'x', output='out.txt', io_flags=IOFlags.OUT_APPEND)
        for _ in range(3):
            self.evaluator.execute(command)
        self.assertEqual(self.read('out.txt'), 'x\nx\nx\n')

    def test_engine_descriptors_untouched(self):
        """Test redirections of an external command stay in the child."""
        before = fd_identity(STDOUT_FILENO)
        open_before = open_descriptors()
        self.evaluator.execute(simple('echo', 'x', output='out.txt', error='err.txt'))
        self.assertEqual(fd_identity(STDOUT_FILENO), before)
        self.assertEqual(open_descriptors(), open_before)


if __name__ == '__main__':
    unittest.main()
