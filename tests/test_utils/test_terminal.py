"""Tests for terminal color utilities."""

import os
from io import StringIO
from unittest.mock import patch

from nbstat.utils.terminal import RED, colorize, use_color


class TestUseColor:
    def test_false_when_not_tty(self):
        assert use_color(StringIO()) is False

    def test_true_when_tty(self):
        stream = StringIO()
        stream.isatty = lambda: True
        assert use_color(stream) is True

    @patch.dict(os.environ, {"NO_COLOR": "1"})
    def test_no_color_env_disables_color(self):
        stream = StringIO()
        stream.isatty = lambda: True
        assert use_color(stream) is False

    @patch.dict(os.environ, {"NO_COLOR": ""})
    def test_no_color_empty_string_allows_color(self):
        stream = StringIO()
        stream.isatty = lambda: True
        assert use_color(stream) is True


class TestColorize:
    def test_enabled(self):
        assert colorize("error", RED, True) == "\033[31merror\033[0m"

    def test_disabled(self):
        assert colorize("error", RED, False) == "error"
