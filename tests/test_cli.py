"""CLI tests for bundle, imports and strip commands."""

import sys
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from click.testing import CliRunner

sys.path.insert(0, str(Path(__file__).parent.parent))

from cssinline.cli import cli


class TestCli(unittest.TestCase):
    def setUp(self):
        self.runner = CliRunner()
        self.tmp_dir = tempfile.TemporaryDirectory()
        self.root = Path(self.tmp_dir.name)
        (self.root / "css").mkdir()
        (self.root / "css" / "main.css").write_text(
            "@import url(base.css);\n@import url(gone.css);\n.main {}",
            encoding="utf-8",
        )
        (self.root / "css" / "base.css").write_text("@import url(main.css);\n.base {}", encoding="utf-8")
        self.config = {"base_dir": str(self.root), "groups": {"site": ["/css/main.css"]}}

    def tearDown(self):
        self.tmp_dir.cleanup()

    @patch("cssinline.cli.setup_logging")
    @patch("cssinline.cli.ensure_directories")
    @patch("cssinline.cli.load_config")
    @patch("cssinline.cli.write_bundles")
    def test_bundle_runs(self, mock_write, mock_load, *_mocks):
        mock_load.return_value = self.config
        mock_write.return_value = {
            "status": "completed",
            "output_dir": "dist",
            "bundles": {"site": "dist/site.css"},
        }
        result = self.runner.invoke(cli, ["bundle", "--group", "site", "--output-dir", "dist"])

        self.assertEqual(result.exit_code, 0, result.output)
        kwargs = mock_write.call_args.kwargs
        self.assertEqual(kwargs["names"], ["site"])
        self.assertEqual(kwargs["output_dir"], "dist")
        self.assertIn("site: dist/site.css", result.output)

    @patch("cssinline.cli.setup_logging")
    @patch("cssinline.cli.load_config", return_value={"logging": {}})
    def test_bundle_without_groups_fails(self, *_mocks):
        result = self.runner.invoke(cli, ["bundle"])
        self.assertEqual(result.exit_code, 1)

    @patch("cssinline.cli.setup_logging")
    @patch("cssinline.cli.load_config")
    def test_imports_lists_order_and_issues(self, mock_load, *_mocks):
        mock_load.return_value = self.config
        result = self.runner.invoke(cli, ["imports", "/css/main.css"])

        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("1. /css/base.css", result.output)
        self.assertIn("2. /css/main.css", result.output)
        self.assertIn("cycle: /css/main.css (in /css/base.css)", result.output)
        self.assertIn("unreadable: /css/gone.css (in /css/main.css)", result.output)

    @patch("cssinline.cli.setup_logging")
    @patch("cssinline.cli.load_config")
    def test_imports_missing_root_fails(self, mock_load, *_mocks):
        mock_load.return_value = self.config
        result = self.runner.invoke(cli, ["imports", "/css/absent.css"])
        self.assertEqual(result.exit_code, 1)

    @patch("cssinline.cli.setup_logging")
    @patch("cssinline.cli.load_config", return_value={})
    def test_strip_prints_clean_css(self, *_mocks):
        path = self.root / "css" / "main.css"
        result = self.runner.invoke(cli, ["strip", str(path)])

        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(result.output, "\n\n.main {}")

    @patch("cssinline.cli.setup_logging")
    @patch("cssinline.cli.load_config", side_effect=FileNotFoundError("Configuration file not found"))
    def test_missing_default_config_uses_defaults(self, *_mocks):
        path = self.root / "css" / "base.css"
        result = self.runner.invoke(cli, ["strip", str(path)])

        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(result.output, "\n.base {}")


if __name__ == "__main__":
    unittest.main()
