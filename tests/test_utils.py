# File: tests/test_utils.py
import io

import pytest

from link_scout.errors import InputFileMissing, InputUnavailable, ReferenceResolutionError
from link_scout.utils import (
    collect_targets,
    read_lines,
    read_url_list,
    resolve_endpoint,
    resolve_reference,
)


def test_read_lines_skips_blank_and_keeps_duplicates():
    assert read_lines(["a\n", "\n", "  b  ", "a", "\t\n"]) == ["a", "b", "a"]


def test_read_url_list(tmp_path):
    path = tmp_path / "urls.txt"
    path.write_text("http://x/1\n\nhttp://x/2\r\nhttp://x/1\n", encoding="utf-8")
    assert read_url_list(path) == ["http://x/1", "http://x/2", "http://x/1"]


def test_read_url_list_missing(tmp_path):
    with pytest.raises(InputFileMissing) as info:
        read_url_list(tmp_path / "missing.txt")
    assert "missing.txt" in str(info.value)


def test_collect_targets_precedence(tmp_path):
    path = tmp_path / "urls.txt"
    path.write_text("http://from-file\n", encoding="utf-8")
    stdin = io.StringIO("http://from-stdin\n")
    assert collect_targets("http://single", path, stdin) == ("http://single",)
    assert collect_targets(None, path, stdin) == ("http://from-file",)
    assert collect_targets(None, None, stdin) == ("http://from-stdin",)


@pytest.mark.parametrize("url,stdin", [(None, None), ("   ", None), (None, io.StringIO("\n\n"))])
def test_collect_targets_unavailable(url, stdin):
    with pytest.raises(InputUnavailable):
        collect_targets(url, None, stdin)


def test_collect_targets_blank_file(tmp_path):
    path = tmp_path / "blank.txt"
    path.write_text("\n  \n", encoding="utf-8")
    with pytest.raises(InputUnavailable):
        collect_targets(None, path, io.StringIO("http://ignored\n"))


@pytest.mark.parametrize(
    "base,ref,expected",
    [
        ("https://example.com/page", "/api/x", "https://example.com/api/x"),
        ("https://example.com/a/b.js", "/c?d=1#e", "https://example.com/c?d=1#e"),
        ("https://example.com/a/b.js", "//cdn.example.org/x.js", "https://cdn.example.org/x.js"),
        ("https://example.com/a/b.js", "/../up", "https://example.com/up"),
    ],
)
def test_resolve_reference(base, ref, expected):
    assert resolve_reference(base, ref) == expected


@pytest.mark.parametrize("base", ["https://example.com/", "http://other.org/deep/path?q=1", "relative/base"])
def test_absolute_reference_passes_through(base):
    absolute = "https://api.example.net/v1/items?id=3"
    assert resolve_reference(base, absolute) == absolute


def test_resolution_error_and_fallback():
    with pytest.raises(ReferenceResolutionError):
        resolve_reference("http://[::1", "/x")
    assert resolve_endpoint("http://[::1", "/x") == "/x"


@pytest.mark.parametrize("ref", ["/a%zz", "/trailing%", "/half%4", "/page#top%g1"])
def test_invalid_percent_escape_is_not_resolved(ref):
    with pytest.raises(ReferenceResolutionError) as info:
        resolve_reference("https://example.com/page", ref)
    assert "invalid URL escape" in str(info.value)
    assert resolve_endpoint("https://example.com/page", ref) == ref


def test_invalid_percent_escape_in_base_is_not_resolved():
    assert resolve_endpoint("https://example.com/%zz/page", "/api") == "/api"


def test_valid_percent_escape_still_resolves():
    assert resolve_endpoint("https://example.com/page", "/a%20b%2F") == "https://example.com/a%20b%2F"


def test_query_escapes_are_not_checked():
    assert resolve_endpoint("https://example.com/page", "/q?x=%g1") == "https://example.com/q?x=%g1"
