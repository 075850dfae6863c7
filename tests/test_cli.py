"""Tests for mac_cleanup.cli."""
import io
import unittest
from unittest import mock

from rich.console import Console

from mac_cleanup import cli
from mac_cleanup.core import config as config_module
from mac_cleanup.core.targets import build_categories


class CliTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.out = io.StringIO()
        patcher = mock.patch.object(cli, "console", Console(file=self.out, width=200))
        patcher.start()
        self.addCleanup(patcher.stop)
        loader = mock.patch.object(config_module, "load", return_value=dict(config_module.DEFAULTS))
        loader.start()
        self.addCleanup(loader.stop)


class TestMain(CliTestCase):
    def test_categories_lists_keys(self) -> None:
        self.assertEqual(cli.main(["categories"]), 0)
        text = self.out.getvalue()
        self.assertIn("node_modules", text)
        self.assertIn("python_cache", text)

    def test_unknown_only_key_rejected(self) -> None:
        self.assertEqual(cli.main(["--only", "bogus"]), 1)
        self.assertIn("Unknown category: bogus", self.out.getvalue())

    def test_parser_flags(self) -> None:
        args = cli.build_parser().parse_args(["-d", "-f", "--only", "trash", "logs"])
        self.assertTrue(args.dry_run)
        self.assertTrue(args.force)
        self.assertEqual(args.only, ["trash", "logs"])

    def test_keyboard_interrupt(self) -> None:
        with mock.patch.object(cli, "run_cleanup", side_effect=KeyboardInterrupt):
            self.assertEqual(cli.main(["-d"]), 130)


class TestPromptCategories(CliTestCase):
    def test_non_tty_confirm(self) -> None:
        cats = build_categories("/Users/tester", dict(config_module.DEFAULTS))
        with mock.patch.object(cli.sys, "stdin", mock.Mock(**{"isatty.return_value": False})), \
                mock.patch.object(cli, "confirm", return_value=True):
            self.assertEqual(cli.prompt_categories(cats), cats)
        with mock.patch.object(cli.sys, "stdin", mock.Mock(**{"isatty.return_value": False})), \
                mock.patch.object(cli, "confirm", return_value=False):
            self.assertEqual(cli.prompt_categories(cats), [])

    def test_tui_selection(self) -> None:
        cats = build_categories("/Users/tester", dict(config_module.DEFAULTS))
        prompt = mock.Mock()
        prompt.ask.return_value = ["ram", "trash"]
        with mock.patch.object(cli.questionary, "checkbox", return_value=prompt):
            picked = cli._prompt_categories_tui(cats)
        self.assertEqual([c.key for c in picked], ["trash", "ram"])

    def test_tui_cancelled(self) -> None:
        prompt = mock.Mock()
        prompt.ask.return_value = None
        with mock.patch.object(cli.questionary, "checkbox", return_value=prompt):
            self.assertEqual(cli._prompt_categories_tui([]), [])
