"""Tests for ghr.output.console module."""

from __future__ import annotations

import pytest

from ghr.output.console import (
    ConsoleProtocol,
    MockConsole,
    OutputRecord,
    RichConsole,
    Style,
)


class TestStyle:
    """Test Style enum."""

    def test_str_conversion(self) -> None:
        assert str(Style.SUCCESS) == "success"
        assert str(Style.WARNING) == "warning"
        assert str(Style.DEFAULT) == "default"

    def test_all_styles_exist(self) -> None:
        expected = {"DEFAULT", "SUCCESS", "ERROR", "WARNING", "INFO", "DIM", "HEADER"}
        assert {s.name for s in Style} == expected


class TestMockConsole:
    """Test MockConsole for testing purposes."""

    def test_print_captures_message(self) -> None:
        console = MockConsole()
        console.print("Uploading app.zip...")
        assert console.outputs == [OutputRecord("Uploading app.zip...", Style.DEFAULT)]

    def test_prefixed_helpers(self) -> None:
        console = MockConsole()
        console.success("done")
        console.error("failed")
        console.warning("careful")
        console.info("fyi")
        assert console.messages == ["OK done", "error: failed", "warning: careful", "info: fyi"]
        assert [o.style for o in console.outputs] == [
            Style.SUCCESS,
            Style.ERROR,
            Style.WARNING,
            Style.INFO,
        ]

    def test_header_and_newline(self) -> None:
        console = MockConsole()
        console.header("Release")
        console.newline()
        assert console.text == "Release\n"

    def test_has_warning(self) -> None:
        console = MockConsole()
        console.print("plain")
        assert not console.has_warning()
        console.warning("retrying")
        assert console.has_warning()

    def test_find(self) -> None:
        console = MockConsole()
        console.print("Uploading a.zip...")
        console.print("Uploading b.zip...")
        console.print("Release ready")
        assert len(console.find("Uploading")) == 2
        assert console.find("missing") == []

    def test_satisfies_protocol(self) -> None:
        console: ConsoleProtocol = MockConsole()
        console.print("ok")


class TestRichConsole:
    """RichConsole writes plain text without interpreting markup."""

    def test_print_keeps_brackets(self, capsys: pytest.CaptureFixture[str]) -> None:
        console = RichConsole(no_color=True)
        console.print("asset [linux] uploaded", Style.SUCCESS)
        assert "asset [linux] uploaded" in capsys.readouterr().out

    def test_warning_prefix(self, capsys: pytest.CaptureFixture[str]) -> None:
        console = RichConsole(no_color=True)
        console.warning("Pattern 'x' does not match any files.")
        assert "warning: Pattern 'x' does not match any files." in capsys.readouterr().out

    def test_stderr(self, capsys: pytest.CaptureFixture[str]) -> None:
        console = RichConsole(stderr=True, no_color=True)
        console.error("boom")
        captured = capsys.readouterr()
        assert "error: boom" in captured.err
        assert captured.out == ""
