import logging

import pytest

from cache_warmer.errors import UriFileError, UriParseError
from cache_warmer.loader import parse_uri, read_uris


def test_scenario_malformed_line_skipped(tmp_path, caplog):
    path = tmp_path / "uris.txt"
    path.write_text("a\nb/c?x=1\nbad path\nd.html\n", encoding="utf-8")

    with caplog.at_level(logging.WARNING, logger="cache_warmer"):
        uris = read_uris("http://x/", path)

    assert uris == ["http://x/a", "http://x/b/c?x=1", "http://x/d.html"]
    warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
    assert len(warnings) == 1
    assert "bad path" in warnings[0].getMessage()


def test_blank_line_resolves_to_base(tmp_path, caplog):
    path = tmp_path / "uris.txt"
    path.write_text("a\n\nb\n", encoding="utf-8")
    with caplog.at_level(logging.WARNING, logger="cache_warmer"):
        assert read_uris("http://x/", path) == ["http://x/a", "http://x/", "http://x/b"]
    assert not caplog.records


def test_blank_line_without_base_is_warned(tmp_path, caplog):
    path = tmp_path / "uris.txt"
    path.write_text("https://example.com/a\n\n   \nhttps://example.com/b", encoding="utf-8")
    with caplog.at_level(logging.WARNING, logger="cache_warmer"):
        assert read_uris("", path) == ["https://example.com/a", "https://example.com/b"]
    warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
    assert [w.getMessage().split(" of ")[0] for w in warnings] == ["Skipping line 2", "Skipping line 3"]


def test_missing_file_raises(tmp_path):
    with pytest.raises(UriFileError):
        read_uris("", tmp_path / "missing.txt")


def test_directory_instead_of_file_raises(tmp_path):
    with pytest.raises(UriFileError):
        read_uris("", tmp_path)


def test_undecodable_line_is_skipped(tmp_path, caplog):
    path = tmp_path / "uris.txt"
    path.write_bytes(b"/a\n/\xff\n/b\r\n")
    with caplog.at_level(logging.WARNING, logger="cache_warmer"):
        uris = read_uris("http://x", path)

    assert uris == ["http://x/a", "http://x/b"]
    warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
    assert len(warnings) == 1
    assert "line 2" in warnings[0].getMessage()


@pytest.mark.parametrize(
    "base,line",
    [
        ("", "/relative/path"),
        ("", "ftp://example.com/file"),
        ("http://", "/no-host"),
        ("http://example.com/", "tab\there"),
    ],
)
def test_parse_uri_rejects(base, line):
    with pytest.raises(UriParseError):
        parse_uri(base, line)


def test_parse_uri_accepts_full_lines_without_base():
    assert parse_uri("", "https://example.com/x") == "https://example.com/x"
