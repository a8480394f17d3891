"""
Unit tests for the alsversions command line.
"""

import logging
import subprocess
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from alstools.alsversions import cli
from alstools.alsversions.compression import is_gzip_file
from alstools.alsversions.config import AlsConfig
from alstools.alsversions.log import setup_logger
from alstools.alsversions.project import Project
from alstools.alsversions.vcs import GitClient, GitCommandError

from fakes import FakeGit, ScriptedConsole, LIVE_SET_XML, write_live_set


class CliTestCase(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.directory = Path(self._tmp.name)
        self.console = ScriptedConsole()

    def tearDown(self):
        self._tmp.cleanup()

    def main(self, *argv):
        return cli.main(list(argv), console=self.console, directory=self.directory)


class TestUsage(CliTestCase):
    """Invalid command lines print usage and exit 1 without running anything."""

    def test_no_arguments(self):
        self.assertEqual(self.main(), 1)
        self.assertIn("usage: alsversions <subcommand>", self.console.output)

    def test_help(self):
        self.assertEqual(self.main("-h"), 1)
        self.assertIn("Available subcommands are:", self.console.output)

    def test_unknown_flag(self):
        self.assertEqual(self.main("-x"), 1)
        self.assertIn("usage: alsversions <subcommand>", self.console.output)

    def test_missing_argument(self):
        self.assertEqual(self.main("-c"), 1)
        self.assertIn("usage: alsversions <subcommand>", self.console.output)

    def test_two_operations(self):
        self.assertEqual(self.main("-s", "-u"), 1)
        self.assertFalse((self.directory / ".git").exists())
        self.assertFalse((self.directory / ".gitattributes").exists())

    def test_invalid_flag_after_valid_one_runs_nothing(self):
        path = self.directory / "song.als"
        path.write_bytes(LIVE_SET_XML)

        self.assertEqual(self.main("-c", "song.als", "-x"), 1)

        self.assertFalse(is_gzip_file(path))

    def test_parser_accepts_verbose_with_operation(self):
        args = cli.build_parser().parse_args(["-v", "-u"])
        self.assertTrue(args.verbose)
        self.assertTrue(args.update)


class TestFileCommands(CliTestCase):
    """Tests for -c, -d and -l."""

    def test_compress(self):
        path = self.directory / "song.als"
        path.write_bytes(LIVE_SET_XML)

        self.assertEqual(self.main("-c", "song.als"), 0)

        self.assertTrue(is_gzip_file(path))
        self.assertEqual(self.console.messages[:2], ["Compressing song.als", "---"])

    def test_decompress(self):
        path = write_live_set(self.directory / "song.als")

        self.assertEqual(self.main("-d", "song.als"), 0)

        self.assertEqual(path.read_bytes(), LIVE_SET_XML)

    def test_decompress_missing_file(self):
        self.assertEqual(self.main("-d", "missing.als"), 1)
        self.assertIn("Error: File not found", self.console.output)

    def test_list(self):
        write_live_set(self.directory / "a.als")
        (self.directory / "b.als").write_bytes(LIVE_SET_XML)

        self.assertEqual(self.main("-l"), 0)

        self.assertIn("Git repository: no", self.console.messages)
        self.assertIn("a.als: compressed", self.console.messages)
        self.assertIn("b.als: decompressed", self.console.messages)

    def test_list_empty(self):
        self.assertEqual(self.main("-l"), 0)
        self.assertIn("No .als files found", self.console.output)


class TestRepositoryCommands(CliTestCase):
    """Tests for -s, -u and -m with git replaced by FakeGit."""

    def run_with_fake_git(self, argv, answers=(), **git_kwargs):
        self.git = FakeGit(self.directory, **git_kwargs)
        self.console = ScriptedConsole(answers)
        project = Project(self.directory, AlsConfig(), vcs=self.git, console=self.console)
        args = cli.build_parser().parse_args(argv)
        return cli.run(args, project)

    def test_setup(self):
        code = self.run_with_fake_git(["-s"], answers=["First"], status=["?? .gitattributes"])
        self.assertEqual(code, 0)
        self.assertEqual(self.console.messages[:2], ["Setting up git repo.", "---"])
        self.assertEqual(self.git.commits, ["First"])

    def test_update(self):
        (self.directory / ".git").mkdir()
        code = self.run_with_fake_git(["-u"])
        self.assertEqual(code, 0)
        self.assertEqual(self.console.messages[0], "You have requested to update the git repo.")

    def test_merge(self):
        (self.directory / ".git").mkdir()
        code = self.run_with_fake_git(["-m", "drums"], branch="drums")
        self.assertEqual(code, 0)
        self.assertEqual(
            self.console.messages[0],
            "You have requested to merge drums with the master branch.",
        )
        self.assertEqual(self.git.call_names, ["checkout", "merge"])

    def test_merge_failure_exits_1(self):
        (self.directory / ".git").mkdir()
        self.git = FakeGit(self.directory, branch="master")
        self.git.fail_on["merge"] = GitCommandError(["git", "merge", "drums"], 1)
        project = Project(self.directory, AlsConfig(), vcs=self.git, console=self.console)

        code = cli.run(cli.build_parser().parse_args(["-m", "drums"]), project)

        self.assertEqual(code, 1)
        self.assertIn("Error: git failed", self.console.output)

    def test_input_ends_at_prompt(self):
        git = FakeGit(self.directory, status=["?? .gitattributes"])

        def make_project(directory, config=None, console=None):
            return Project(directory, config, vcs=git, console=console)

        with mock.patch.object(cli, "Project", side_effect=make_project):
            code = self.main("-s")

        self.assertEqual(code, 130)
        self.assertIn("Operation cancelled by user.", self.console.output)
        self.assertEqual(git.commits, [])


class TestVerbose(CliTestCase):
    """Tests for -v debug tracing of git commands."""

    def setUp(self):
        super().setUp()
        self.addCleanup(setup_logger, False)

    def completed(self, command, **kwargs):
        return subprocess.CompletedProcess(command, 0, stdout="* master\n", stderr="")

    def test_verbose_enables_debug(self):
        self.assertEqual(self.main("-v", "-l"), 0)
        self.assertTrue(logging.getLogger("alsversions").isEnabledFor(logging.DEBUG))

    def test_debug_off_by_default(self):
        self.assertEqual(self.main("-l"), 0)
        self.assertFalse(logging.getLogger("alsversions").isEnabledFor(logging.DEBUG))

    def test_git_commands_logged_at_debug(self):
        setup_logger(verbose=True)
        git = GitClient(self.directory)

        with mock.patch("alstools.alsversions.vcs.subprocess.run", side_effect=self.completed):
            with self.assertLogs("alsversions", "DEBUG") as logs:
                git.current_branch()
                git.checkout("drums")

        self.assertEqual(
            logs.output,
            [
                "DEBUG:alsversions:Running: git branch --no-color",
                "DEBUG:alsversions:Running: git checkout drums",
            ],
        )


if __name__ == "__main__":
    unittest.main()
