"""Tests for header and filename helpers."""

from __future__ import annotations

import pytest

from httpreq.http.headers import load_headers_from_file, parse_media_params
from httpreq.utils.file import is_safe_filename, write_file_synced


def test_load_headers_from_file(tmp_path):
    header_file = tmp_path / "headers.txt"
    header_file.write_text(
        "# Exported headers\n"
        "\n"
        "Accept: application/json\n"
        "Authorization: Bearer token123\n"
        "X-Url: http://example.org:8080/a\n"
        "not a header line\n"
    )

    headers = load_headers_from_file(str(header_file))

    assert headers == {
        "Accept": "application/json",
        "Authorization": "Bearer token123",
        "X-Url": "http://example.org:8080/a",
    }


def test_load_headers_from_missing_file(tmp_path):
    assert load_headers_from_file(str(tmp_path / "nope.txt")) == {}


@pytest.mark.parametrize(
    "value,expected",
    [
        ('attachment; filename="x.bin"', ("attachment", {"filename": "x.bin"})),
        ("Attachment; FileName=report.pdf", ("attachment", {"filename": "report.pdf"})),
        ('form-data; name="file"; filename="a;b.txt"', ("form-data", {"name": "file", "filename": "a;b.txt"})),
        ("inline", ("inline", {})),
        ("attachment;", ("attachment", {})),
        (
            "attachment; filename=\"plain.txt\"; filename*=UTF-8''na%C3%AFve.txt",
            ("attachment", {"filename": "naïve.txt"}),
        ),
        ('attachment; filename="say \\"hi\\".txt"', ("attachment", {"filename": 'say "hi".txt'})),
    ],
)
def test_parse_media_params(value, expected):
    assert parse_media_params(value) == expected


@pytest.mark.parametrize(
    "value",
    [
        "",
        ";",
        '; filename="x"',
        "bad type; a=b",
        "attachment; foo",
        "attachment; =v",
        "attachment; filename=x y.bin",
        'attachment; filename="a.bin"; FILENAME="b.bin"',
        'attachment; filename="open',
        'attachment; filename="x" trailing',
    ],
)
def test_parse_media_params_rejects_malformed(value):
    with pytest.raises(ValueError):
        parse_media_params(value)


@pytest.mark.parametrize(
    "filename,safe",
    [
        ("x.bin", True),
        ("report 2024.pdf", True),
        ("", False),
        (".", False),
        ("..", False),
        ("../x.bin", False),
        ("a/b", False),
        ("a\\b", False),
        ("/abs", False),
        ("C:x", False),
        ("nul\x00byte", False),
    ],
)
def test_is_safe_filename(filename, safe):
    assert is_safe_filename(filename) is safe


def test_write_file_synced(tmp_path):
    dest = write_file_synced(tmp_path / "out.bin", b"synced bytes")

    assert dest.read_bytes() == b"synced bytes"
