"""Tests for config persistence and input sanitization.

Ensures malformed config data is safely normalized on load.
"""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path
from unittest import mock

from lazydiff import config
from lazydiff.git import DEFAULT_TIMEOUT_SECONDS
from lazydiff.highlight import DEFAULT_STYLE


class ConfigBehaviorTests(unittest.TestCase):
    def test_values_round_trip(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "nested" / "config.json"
            with mock.patch("lazydiff.config.CONFIG_PATH", config_path):
                config.save_style("friendly")
                config.save_disable_default_mappings(True)

                self.assertEqual(config.load_style(), "friendly")
                self.assertTrue(config.load_disable_default_mappings())
                self.assertEqual(config.load_config(), {"style": "friendly", "disable_default_mappings": True})

    def test_missing_file_uses_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with mock.patch("lazydiff.config.CONFIG_PATH", Path(tmp) / "absent.json"):
                self.assertEqual(config.load_config(), {})
                self.assertEqual(config.load_style(), DEFAULT_STYLE)
                self.assertFalse(config.load_disable_default_mappings())
                self.assertEqual(config.load_git_timeout_seconds(), DEFAULT_TIMEOUT_SECONDS)

    def test_malformed_values_fall_back(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "config.json"
            with mock.patch("lazydiff.config.CONFIG_PATH", config_path):
                config.save_config({"style": 3, "disable_default_mappings": "yes", "git_timeout_seconds": True})
                self.assertEqual(config.load_style(), DEFAULT_STYLE)
                self.assertFalse(config.load_disable_default_mappings())
                self.assertEqual(config.load_git_timeout_seconds(), DEFAULT_TIMEOUT_SECONDS)

                config.save_config({"git_timeout_seconds": -1})
                self.assertEqual(config.load_git_timeout_seconds(), DEFAULT_TIMEOUT_SECONDS)
                config.save_config({"git_timeout_seconds": 2.5})
                self.assertEqual(config.load_git_timeout_seconds(), 2.5)

    def test_invalid_json_and_non_object_are_ignored(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "config.json"
            with mock.patch("lazydiff.config.CONFIG_PATH", config_path):
                config_path.write_text("{not json", encoding="utf-8")
                self.assertEqual(config.load_config(), {})
                config_path.write_text("[1, 2]", encoding="utf-8")
                self.assertEqual(config.load_config(), {})


if __name__ == "__main__":
    unittest.main()
