import io

import pytest

from riffctl import config as config_module
from riffctl.config import (
    ALL_RUNTIMES,
    NAMESPACE_FLAG,
    SHELL_FLAG,
    Config,
    FieldError,
    FieldErrors,
    ValidationError,
    error_invalid_value,
    error_missing_field,
    error_text,
    format_table,
    success_text,
    warn_text,
)


def test_missing_field_names_the_field():
    errors = error_missing_field(NAMESPACE_FLAG)
    assert len(errors) == 1
    assert errors[0].paths == (NAMESPACE_FLAG,)
    assert NAMESPACE_FLAG in str(errors)


def test_invalid_value_mentions_value_and_field():
    errors = error_invalid_value("zorglub", SHELL_FLAG)
    assert len(errors) == 1
    assert "zorglub" in errors[0].message
    assert errors[0].paths == (SHELL_FLAG,)


def test_also_combines_without_mutating():
    empty = FieldErrors()
    combined = empty.also(error_missing_field(NAMESPACE_FLAG), error_missing_field(SHELL_FLAG))
    assert len(empty) == 0
    assert [e.paths for e in combined] == [(NAMESPACE_FLAG,), (SHELL_FLAG,)]


def test_also_accepts_single_field_error():
    single = FieldError("boom", ("--x",))
    assert list(FieldErrors().also(single)) == [single]


def test_equality_of_field_errors():
    assert error_missing_field(NAMESPACE_FLAG) == error_missing_field(NAMESPACE_FLAG)
    assert error_missing_field(NAMESPACE_FLAG) != error_missing_field(SHELL_FLAG)


def test_to_error_empty_is_none():
    assert FieldErrors().to_error() is None


def test_to_error_raises_validation_error():
    errors = error_missing_field(NAMESPACE_FLAG)
    err = errors.to_error()
    assert isinstance(err, ValidationError)
    assert err.errors == errors
    with pytest.raises(ValueError, match=NAMESPACE_FLAG):
        raise err


def test_text_helpers_without_color(monkeypatch):
    monkeypatch.setattr(config_module, "no_color", True)
    assert success_text("ok") == "ok"
    assert warn_text("mixed") == "mixed"
    assert error_text("missing") == "missing"


def test_text_helpers_with_color(monkeypatch):
    monkeypatch.setattr(config_module, "no_color", False)
    for text in (success_text("ok"), warn_text("ok"), error_text("ok")):
        assert text.startswith("\x1b[")
        assert "ok" in text
    assert len({success_text("ok"), warn_text("ok"), error_text("ok")}) == 3


def test_format_table_matches_doctor_layout():
    rows = [["NAMESPACE", "STATUS"], ["default", "missing"], ["riff-system", "missing"]]
    expected = "NAMESPACE     STATUS\ndefault       missing\nriff-system   missing\n"
    assert format_table(rows) == expected


def test_format_table_ignores_color_codes_for_width(monkeypatch):
    monkeypatch.setattr(config_module, "no_color", False)
    colored = format_table([[error_text("a"), "x"], ["bbb", "y"]])
    monkeypatch.setattr(config_module, "no_color", True)
    plain = format_table([["a", "x"], ["bbb", "y"]])
    strip = config_module._ANSI_ESCAPE.sub("", colored)
    assert strip == plain


def test_format_table_empty():
    assert format_table([]) == ""


def test_config_defaults():
    out = io.StringIO()
    cfg = Config(stdout=out)
    assert cfg.runtimes == frozenset(ALL_RUNTIMES)
    assert cfg.stdout is out
    assert cfg.client is None