"""
Entry Point Tests
=================

Tests for CLI parsing and startup failures.
"""

import pytest

from mnemnk_screen import main as main_module
from mnemnk_screen.capture import CaptureError


class _NoDisplaysSource:
    def list_displays(self):
        raise CaptureError("display server unavailable")


@pytest.fixture(autouse=True)
def _isolated_cwd(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)


class TestMain:
    """Startup exit codes."""

    def test_parser_defaults(self):
        args = main_module.build_parser().parse_args([])
        assert args.config is None
        assert args.settings is None

    def test_parser_short_config_flag(self):
        args = main_module.build_parser().parse_args(["-c", '{"interval": 5}'])
        assert args.config == '{"interval": 5}'

    def test_malformed_initial_config(self):
        assert main_module.main(["--config", '{"interval": "soon"}']) == main_module.EXIT_BAD_CONFIG

    def test_invalid_settings_file(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("screen:\n  interval: soon\n", encoding="utf-8")
        assert main_module.main(["--settings", str(path)]) == main_module.EXIT_BAD_CONFIG

    def test_enumeration_failure(self, monkeypatch):
        monkeypatch.setattr(main_module, "MssFrameSource", _NoDisplaysSource)
        assert main_module.main([]) == main_module.EXIT_NO_DISPLAYS
