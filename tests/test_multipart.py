"""Unit tests for multipart file part extraction."""

import pytest

from conftest import build_multipart, receipt_part
from pricescout.receipt.multipart import DEFAULT_MIME_TYPE, MultipartExtractor, parse_boundary


@pytest.fixture
def extractor():
    return MultipartExtractor("receipt")


class TestParseBoundary:
    def test_bare_boundary(self):
        assert parse_boundary("multipart/form-data; boundary=XYZ") == "XYZ"

    def test_quoted_boundary(self):
        assert parse_boundary('multipart/form-data; boundary="a b;c"') == "a b;c"

    def test_case_insensitive_media_type(self):
        assert parse_boundary("Multipart/Form-Data; charset=utf-8; Boundary=----WebKit123") == "----WebKit123"

    def test_missing_boundary(self):
        assert parse_boundary("multipart/form-data") is None
        assert parse_boundary('multipart/form-data; boundary=""') is None

    def test_not_multipart(self):
        assert parse_boundary("application/json") is None
        assert parse_boundary(None) is None


class TestExtract:
    def test_jpeg_part(self, extractor):
        jpeg = bytes([0xFF, 0xD8, 0xFF, 0xE0, 0x00, 0x10, 0x4A, 0x46, 0x49, 0x46, 0xFF, 0xD9])
        body = build_multipart("XYZ", [receipt_part(jpeg, "image/jpeg")])

        part = extractor.extract(body, "XYZ")

        assert part is not None
        assert part.data == jpeg
        assert part.mime_type == "image/jpeg"

    def test_every_byte_value_survives(self, extractor):
        data = bytes(range(256)) * 4
        body = build_multipart("boundary42", [receipt_part(data)])

        part = extractor.extract(body, "boundary42")

        assert part.data == data

    def test_default_mime_type(self, extractor):
        body = build_multipart("XYZ", [receipt_part(b"abc", mime_type=None)])

        assert extractor.extract(body, "XYZ").mime_type == DEFAULT_MIME_TYPE

    def test_content_type_header_case_insensitive(self, extractor):
        headers = ['content-disposition: form-data; name="receipt"', "CONTENT-TYPE: image/png"]
        body = build_multipart("XYZ", [(headers, b"png")])

        assert extractor.extract(body, "XYZ").mime_type == "image/png"

    def test_missing_part(self, extractor):
        body = build_multipart("XYZ", [receipt_part(b"abc", name="avatar")])

        assert extractor.extract(body, "XYZ") is None

    def test_filename_does_not_count_as_field_name(self, extractor):
        headers = ['Content-Disposition: form-data; name="avatar"; filename="receipt"']
        body = build_multipart("XYZ", [(headers, b"abc")])

        assert extractor.extract(body, "XYZ") is None

    def test_unquoted_field_name(self, extractor):
        headers = ["Content-Disposition: form-data; name=receipt"]
        body = build_multipart("XYZ", [(headers, b"abc")])

        assert extractor.extract(body, "XYZ").data == b"abc"

    def test_first_matching_part_wins(self, extractor):
        body = build_multipart("XYZ", [
            receipt_part(b"note", name="memo"),
            receipt_part(b"first", "image/png"),
            receipt_part(b"second", "image/jpeg"),
        ])

        part = extractor.extract(body, "XYZ")

        assert part.data == b"first"
        assert part.mime_type == "image/png"

    def test_zero_length_body(self, extractor):
        body = build_multipart("XYZ", [receipt_part(b"")])

        part = extractor.extract(body, "XYZ")

        assert part is not None
        assert part.data == b""

    def test_part_without_header_separator(self, extractor):
        body = b'--XYZ\r\nContent-Disposition: form-data; name="receipt"\r\n--XYZ--\r\n'

        assert extractor.extract(body, "XYZ") is None

    def test_boundary_with_pattern_characters(self, extractor):
        boundary = "a.b*c+(d)?[e]^$|\\"
        body = build_multipart(boundary, [receipt_part(b"\x00\x01data")])

        assert extractor.extract(body, boundary).data == b"\x00\x01data"

    def test_preamble_is_ignored(self, extractor):
        body = build_multipart("XYZ", [receipt_part(b"abc")], preamble=b"This is a preamble\r\n\r\nignored\r\n")

        assert extractor.extract(body, "XYZ").data == b"abc"

    def test_empty_buffer(self, extractor):
        assert extractor.extract(b"", "XYZ") is None

    def test_custom_field_name(self):
        body = build_multipart("XYZ", [receipt_part(b"abc", name="image")])

        assert MultipartExtractor("image").extract(body, "XYZ").data == b"abc"

    def test_field_name_is_case_sensitive(self, extractor):
        headers = ['Content-Disposition: form-data; name="RECEIPT"']
        body = build_multipart("XYZ", [(headers, b"abc")])

        assert extractor.extract(body, "XYZ") is None

    def test_header_names_are_case_insensitive(self, extractor):
        headers = ['CONTENT-DISPOSITION: FORM-DATA; NAME="receipt"']
        body = build_multipart("XYZ", [(headers, b"abc")])

        assert extractor.extract(body, "XYZ").data == b"abc"
