"""
Unit tests for settings and token loading.

Loading contract:
- missing/invalid file -> defaults
- unknown keys and invalid values are ignored
- environment variables override file values
"""

import json
import tempfile
import unittest
from pathlib import Path

from kioskday.settings import DEFAULT_DOCUMENT_NAME, Settings, load_access_token, load_settings


class TestLoadSettings(unittest.TestCase):
    def test_missing_file_returns_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            settings = load_settings(Path(d) / "missing.json", environ={})
            self.assertEqual(settings, Settings())
            self.assertEqual(settings.document_name, DEFAULT_DOCUMENT_NAME)

    def test_broken_file_returns_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "settings.json"
            p.write_text("{not json", encoding="utf-8")
            self.assertEqual(load_settings(p, environ={}), Settings())

    def test_known_keys_are_merged(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "settings.json"
            p.write_text(
                json.dumps(
                    {
                        "calendar_id": "team@example.com",
                        "max_results": "25",
                        "refresh_seconds": -5,
                        "timezone": "Europe/Zurich",
                        "unknown": "ignored",
                    }
                ),
                encoding="utf-8",
            )
            settings = load_settings(p, environ={})

            self.assertEqual(settings.calendar_id, "team@example.com")
            self.assertEqual(settings.max_results, 25)
            self.assertEqual(settings.refresh_seconds, 60)
            self.assertEqual(settings.timezone, "Europe/Zurich")

    def test_environment_overrides_file(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "settings.json"
            p.write_text(json.dumps({"document_name": "From file"}), encoding="utf-8")
            env = {"KIOSKDAY_DOCUMENT_NAME": "From env", "KIOSKDAY_MAX_RESULTS": "nope"}
            settings = load_settings(p, environ=env)

            self.assertEqual(settings.document_name, "From env")
            self.assertEqual(settings.max_results, 50)


class TestLoadAccessToken(unittest.TestCase):
    def test_token_from_file(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "token.json"
            p.write_text(json.dumps({"access_token": " abc "}), encoding="utf-8")
            self.assertEqual(load_access_token(p, environ={}), "abc")

    def test_environment_takes_precedence(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "token.json"
            p.write_text(json.dumps({"access_token": "file"}), encoding="utf-8")
            self.assertEqual(load_access_token(p, environ={"KIOSKDAY_ACCESS_TOKEN": "env"}), "env")

    def test_missing_token_is_none(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            self.assertIsNone(load_access_token(Path(d) / "token.json", environ={}))

    def test_settings_token_path(self) -> None:
        settings = Settings(token_path="/tmp/kiosk/token.json")
        self.assertEqual(settings.resolved_token_path(), Path("/tmp/kiosk/token.json"))


if __name__ == "__main__":
    unittest.main()
