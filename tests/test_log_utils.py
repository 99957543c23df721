"""Tests for the operator log."""

import re

import log_utils
from log_utils import log_entry, redact


def test_log_entry_appends_and_prints(log_to_tmp, capsys) -> None:
    log_entry("first")
    log_entry("second")

    lines = log_to_tmp.read_text().splitlines()
    assert len(lines) == 2
    assert re.match(r"\d\d/\d\d/\d\d \d\d:\d\d:\d\d E[SD]T: first$", lines[0])
    assert lines[1].endswith(": second")
    assert "second" in capsys.readouterr().out


def test_redacts_bearer_tokens() -> None:
    assert redact("Authorization: Bearer abc123") == "Authorization: Bearer ***"


def test_redacts_long_opaque_tokens() -> None:
    assert redact("token " + "a" * 32) == "token ***"


def test_redacts_form_fields() -> None:
    message = redact("grant_type=refresh_token&code=AbC123xy&client_id=secretid")
    assert "AbC123xy" not in message
    assert "secretid" not in message


def test_configure_switches_file(tmp_path, monkeypatch) -> None:
    monkeypatch.setattr(log_utils, "_settings", dict(log_utils._settings))
    other = tmp_path / "other.log"
    log_utils.configure(str(other), "UTC")

    log_entry("moved")

    assert "UTC: moved" in other.read_text()


def test_unwritable_log_file_still_prints(tmp_path, monkeypatch, capsys) -> None:
    monkeypatch.setitem(log_utils._settings, "file", str(tmp_path / "no-such-dir" / "log.txt"))

    log_entry("ERROR: something broke")

    captured = capsys.readouterr()
    assert "ERROR: something broke" in captured.out
    assert "Cannot write log file" in captured.err
