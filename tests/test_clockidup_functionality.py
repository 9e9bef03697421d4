import sys
import os
import shutil
import tempfile
import unittest
from unittest.mock import patch, MagicMock
from datetime import datetime, timezone
from io import StringIO

# Add the parent directory to sys.path to import the clockidup package
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
from clockidup import __version__
from clockidup.__main__ import Options, parse_args, run, main
from clockidup.config import Config, save_config, load_config
from clockidup.errors import ClockidupError, ClockifyError, LoginError, WorkspaceNotFoundError


class TestClockidupFunctionality(unittest.TestCase):
    """Test the complete functionality of the clockidup package."""

    def setUp(self):
        """Set up test fixtures."""
        self.env_patcher = patch.dict('os.environ', {}, clear=True)
        self.env_patcher.start()
        self.dotenv_patcher = patch('clockidup.__main__.load_environment')
        self.dotenv_patcher.start()

        self.tmp = tempfile.mkdtemp()
        self.config_path = os.path.join(self.tmp, "clockidup.yml")
        save_config(Config(token="test-token", workspace="workspace-1"), self.config_path)

        self.now = datetime(2021, 7, 3, 18, 0, tzinfo=timezone.utc).astimezone()

        self.client = MagicMock()
        self.client.workspaces.return_value = [
            {"id": "workspace-1-uid", "name": "workspace-1", "memberships": [{"userId": "user-1-uid"}]},
        ]
        self.client.projects.return_value = [{"id": "project-1-uid", "name": "project-1"}]
        self.client.task.return_value = {"id": "task-1-uid", "name": "task-1"}
        self.client.time_entries.return_value = [
            {
                "description": "Review PR",
                "projectId": "project-1-uid",
                "billable": True,
                "timeInterval": {"start": "2021-07-03T13:30:00Z", "end": "2021-07-03T14:00:00Z"},
            },
            {
                "description": "Review my emails",
                "billable": False,
                "timeInterval": {"start": "2021-07-03T13:00:00Z", "end": "2021-07-03T13:30:00Z"},
            },
            {
                "description": "Review PR",
                "projectId": "project-1-uid",
                "billable": True,
                "timeInterval": {"start": "2021-07-03T10:00:00Z", "end": "2021-07-03T11:00:00Z"},
            },
            {
                "description": "write tests",
                "projectId": "project-1-uid",
                "taskId": "task-1-uid",
                "billable": True,
                "timeInterval": {"start": "2021-07-03T09:00:00Z", "end": "2021-07-03T09:12:00Z"},
            },
        ]
        self.tokens = []

    def tearDown(self):
        """Tear down test fixtures."""
        self.dotenv_patcher.stop()
        self.env_patcher.stop()
        shutil.rmtree(self.tmp)

    def new_client(self, token):
        self.tokens.append(token)
        return self.client

    def run_cli(self, argv):
        run(parse_args(argv), config_path=self.config_path, now=lambda: self.now, new_client=self.new_client)

    @patch('sys.stdout', new_callable=StringIO)
    def test_standup_for_a_day(self, mock_stdout):
        self.run_cli(["2021-07-03"])

        self.assertEqual(mock_stdout.getvalue(), (
            "Saturday:\n"
            "- [.2] project-1: task-1: write tests\n"
            "- [.5] Review my emails\n"
            "- [1.5] project-1: Review PR\n"
        ))
        self.assertEqual(set(self.tokens), {"test-token"})

    @patch('sys.stdout', new_callable=StringIO)
    def test_billable_only(self, mock_stdout):
        self.run_cli(["--billable", "2021-07-03"])

        output = mock_stdout.getvalue()
        self.assertNotIn("Review my emails", output)
        self.assertIn("- [1.5] project-1: Review PR", output)

    @patch('sys.stdout', new_callable=StringIO)
    def test_token_and_workspace_flags_win(self, mock_stdout):
        self.client.workspaces.return_value.append(
            {"id": "workspace-2-uid", "name": "workspace-2", "memberships": [{"userId": "user-2-uid"}]})

        self.run_cli(["--token", "flag-token", "--workspace", "workspace-2", "2021-07-03"])

        self.assertEqual(set(self.tokens), {"flag-token"})
        self.assertEqual(self.client.time_entries.call_args[0][:2], ("workspace-2-uid", "user-2-uid"))

    @patch('sys.stdout', new_callable=StringIO)
    def test_environment_overrides_config(self, mock_stdout):
        with patch.dict('os.environ', {"CLOCKIDUP_TOKEN": "env-token"}):
            self.run_cli(["2021-07-03"])
        self.assertEqual(set(self.tokens), {"env-token"})

    def test_unknown_workspace(self):
        with self.assertRaises(WorkspaceNotFoundError):
            self.run_cli(["--workspace", "nope", "2021-07-03"])

    def test_no_token(self):
        save_config(Config(), self.config_path)
        with self.assertRaises(LoginError) as ctx:
            self.run_cli(["2021-07-03"])
        self.assertIn("clockidup login", str(ctx.exception))

    def test_token_that_does_not_work(self):
        self.client.workspaces.side_effect = ClockifyError(401, "Full authentication is required")
        with self.assertRaises(LoginError):
            self.run_cli(["2021-07-03"])

    def test_future_date(self):
        with self.assertRaises(ClockidupError) as ctx:
            self.run_cli(["2021-07-10"])
        self.assertIn("future", str(ctx.exception))

    @patch('sys.stdout', new_callable=StringIO)
    def test_markdown_export(self, mock_stdout):
        md_path = os.path.join(self.tmp, "standup.md")
        self.run_cli(["--md", md_path, "2021-07-03"])

        with open(md_path, encoding="utf-8") as f:
            content = f.read()
        self.assertTrue(content.startswith("# Standup\n\n## Saturday\n"))
        self.assertIn("- [1.5] project-1: Review PR", content)

    @patch('sys.stdout', new_callable=StringIO)
    def test_version(self, mock_stdout):
        self.run_cli(["version"])
        self.assertEqual(mock_stdout.getvalue(), f"{__version__}\n")

    @patch('sys.stdout', new_callable=StringIO)
    def test_help_is_extended(self, mock_stdout):
        self.run_cli(["help"])
        output = mock_stdout.getvalue()
        self.assertIn("synopsis:", output)
        self.assertIn("config file:", output)

    @patch('sys.stderr', new_callable=StringIO)
    def test_command_required(self, mock_stderr):
        with self.assertRaises(ClockidupError):
            self.run_cli([])
        self.assertIn("synopsis:", mock_stderr.getvalue())

    @patch('sys.stdout', new_callable=StringIO)
    @patch('clockidup.login.getpass.getpass', return_value="new-token")
    @patch('builtins.input', side_effect=["y", "1"])
    def test_login(self, mock_input, mock_getpass, mock_stdout):
        self.run_cli(["login"])
        self.assertEqual(load_config(self.config_path), Config(token="new-token", workspace="workspace-1"))

    @patch('sys.stdout', new_callable=StringIO)
    @patch('builtins.input', return_value="1")
    def test_select(self, mock_input, mock_stdout):
        save_config(Config(token="test-token"), self.config_path)
        self.run_cli(["select"])
        self.assertEqual(load_config(self.config_path), Config(token="test-token", workspace="workspace-1"))

    @patch('sys.stdout', new_callable=StringIO)
    @patch('builtins.input', return_value="1")
    def test_select_saves_the_token_flag(self, mock_input, mock_stdout):
        self.run_cli(["select", "--token", "flag-token"])
        self.assertEqual(self.tokens, ["flag-token", "flag-token"])
        self.assertEqual(load_config(self.config_path), Config(token="flag-token", workspace="workspace-1"))

    @patch('sys.stdout', new_callable=StringIO)
    def test_running_entry_uses_the_given_clock(self, mock_stdout):
        self.now = datetime(2021, 7, 3, 14, 0, tzinfo=timezone.utc).astimezone()
        self.client.time_entries.return_value = [
            {
                "description": "Review PR",
                "projectId": "project-1-uid",
                "billable": True,
                "timeInterval": {"start": "2021-07-03T13:30:00Z", "end": None},
            },
        ]
        self.run_cli(["2021-07-03"])
        self.assertIn("- [.5] project-1: Review PR\n", mock_stdout.getvalue())


class TestOptions(unittest.TestCase):

    def test_defaults(self):
        options = parse_args(["yesterday"])
        self.assertIsInstance(options, Options)
        self.assertEqual(options.command, "yesterday")
        self.assertFalse(options.billable)
        self.assertFalse(options.debug)
        self.assertEqual(options.server, "https://api.clockify.me")

    def test_flags(self):
        options = parse_args(["--debug", "--billable", "--server", "http://localhost:8080", "today"])
        self.assertTrue(options.debug)
        self.assertTrue(options.billable)
        self.assertEqual(options.server, "http://localhost:8080")


class TestMain(unittest.TestCase):

    @patch('clockidup.__main__.setup_logging')
    @patch('clockidup.__main__.run')
    def test_exit_code_on_success(self, mock_run, mock_setup_logging):
        self.assertEqual(main(["version"]), 0)
        mock_setup_logging.assert_called_once_with(False)

    @patch('clockidup.__main__.setup_logging')
    @patch('clockidup.__main__.run', side_effect=ClockidupError("boom"))
    def test_exit_code_on_failure(self, mock_run, mock_setup_logging):
        with self.assertLogs("clockidup", level="ERROR") as logs:
            self.assertEqual(main(["--debug", "today"]), 1)
        self.assertIn("boom", logs.output[0])
        mock_setup_logging.assert_called_once_with(True)


if __name__ == '__main__':
    unittest.main()
