"""字节流工具与地址分类测试"""

from __future__ import annotations

import io
from pathlib import Path

import pytest

from pkgfetch.core.exceptions import ValidationError
from pkgfetch.utils.net import is_local_locator, local_path, validate_url_scheme
from pkgfetch.utils.stream import CHUNK_SIZE, open_stream, splice


class TestLocatorKinds:
    @pytest.mark.parametrize(("locator", "local"), [
        ("/srv/repo/a-1.0.apk", True),
        ("relative/a-1.0.apk", True),
        ("file:///srv/repo/a-1.0.apk", True),
        ("http://mirror.example.com/a-1.0.apk", False),
        ("https://mirror.example.com/a-1.0.apk", False),
    ])
    def test_is_local_locator(self, locator: str, local: bool) -> None:
        assert is_local_locator(locator) is local

    def test_local_path_strips_file_scheme(self) -> None:
        assert local_path("file:///srv/repo/x.apk") == "/srv/repo/x.apk"
        assert local_path("/srv/repo/x.apk") == "/srv/repo/x.apk"


class TestValidateUrlScheme:
    def test_https_ok(self) -> None:
        validate_url_scheme("https://example.com/repo")

    def test_ftp_rejected(self) -> None:
        with pytest.raises(ValidationError, match="不允许的 URL 协议"):
            validate_url_scheme("ftp://example.com/repo")

    def test_context_in_error(self) -> None:
        with pytest.raises(ValidationError, match="package fetch"):
            validate_url_scheme("gopher://x", context="package fetch")


class TestOpenStream:
    def test_open_local_file(self, tmp_path: Path) -> None:
        f = tmp_path / "a-1.0.apk"
        f.write_bytes(b"payload")
        stream = open_stream(str(f))
        try:
            assert stream.read() == b"payload"
        finally:
            stream.close()

    def test_open_file_url(self, tmp_path: Path) -> None:
        f = tmp_path / "a-1.0.apk"
        f.write_bytes(b"payload")
        stream = open_stream(f"file://{f}")
        try:
            assert stream.read() == b"payload"
        finally:
            stream.close()

    def test_missing_local_file(self, tmp_path: Path) -> None:
        with pytest.raises(OSError):
            open_stream(str(tmp_path / "missing.apk"))

    def test_disallowed_scheme(self) -> None:
        with pytest.raises(ValidationError):
            open_stream("ftp://example.com/a-1.0.apk")


class TestSplice:
    def test_copies_at_most_max_bytes(self) -> None:
        sink = io.BytesIO()
        assert splice(io.BytesIO(b"0123456789"), sink, 4) == 4
        assert sink.getvalue() == b"0123"

    def test_short_source_returns_copied_count(self) -> None:
        sink = io.BytesIO()
        assert splice(io.BytesIO(b"abc"), sink, 10) == 3
        assert sink.getvalue() == b"abc"

    def test_multiple_chunks(self) -> None:
        data = b"x" * (CHUNK_SIZE * 2 + 17)
        sink = io.BytesIO()
        assert splice(io.BytesIO(data), sink, len(data)) == len(data)
        assert sink.getvalue() == data

    def test_zero_size(self) -> None:
        sink = io.BytesIO()
        assert splice(io.BytesIO(b"abc"), sink, 0) == 0
