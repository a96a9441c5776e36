"""Minimal multipart/form-data decoding for a single file field.

The request body is fully buffered before decoding. Parts are located by
scanning the raw bytes for the literal ``--{boundary}`` delimiter, so binary
payloads are never decoded through a character set and every byte value
survives unchanged.
"""

import re

from pricescout.receipt.base import FilePart

DEFAULT_MIME_TYPE = "application/octet-stream"
HEADER_SEPARATOR = b"\r\n\r\n"
LINE_BREAK = b"\r\n"

_BOUNDARY_PARAM = re.compile(r';\s*boundary\s*=\s*(?:"([^"]*)"|([^;\s]+))', re.IGNORECASE)


def parse_boundary(content_type: str | None) -> str | None:
    """Return the boundary token of a multipart/form-data content type, if any."""
    if not content_type:
        return None
    media_type = content_type.split(";", 1)[0].strip().lower()
    if media_type != "multipart/form-data":
        return None
    match = _BOUNDARY_PARAM.search(content_type)
    if not match:
        return None
    boundary = match.group(1) if match.group(1) is not None else match.group(2)
    return boundary or None


def _split_headers(raw: bytes) -> list[tuple[str, str]]:
    headers = []
    for line in raw.split(LINE_BREAK):
        if b":" not in line:
            continue
        name, _, value = line.partition(b":")
        headers.append(
            (name.decode("latin-1").strip().lower(), value.decode("latin-1").strip())
        )
    return headers


class MultipartExtractor:
    """Pulls the first file part with a given form field name out of a multipart body."""

    def __init__(self, field_name: str = "receipt") -> None:
        self.field_name = field_name
        # name="receipt" or name=receipt, but never filename="receipt"; the value is case-sensitive
        self._name_param = re.compile(
            r'(?:^|;)\s*name\s*=\s*(?-i:"' + re.escape(field_name) + r'"|' + re.escape(field_name) + r')\s*(?:;|$)',
            re.IGNORECASE,
        )

    def _is_target(self, headers: list[tuple[str, str]]) -> bool:
        for name, value in headers:
            if name == "content-disposition" and self._name_param.search(value):
                return True
        return False

    def extract(self, body: bytes, boundary: str) -> FilePart | None:
        """Return the matching part, or None when no complete matching part exists."""
        delimiter = b"--" + boundary.encode("latin-1")

        for fragment in body.split(delimiter):
            if not fragment or fragment.startswith(b"--"):
                # preamble-less start or the closing "--" marker
                continue

            separator = fragment.find(HEADER_SEPARATOR)
            if separator == -1:
                continue

            headers = _split_headers(fragment[:separator])
            if not self._is_target(headers):
                continue

            data = fragment[separator + len(HEADER_SEPARATOR):]
            if data.endswith(LINE_BREAK):
                data = data[: -len(LINE_BREAK)]

            mime_type = next(
                (value for name, value in headers if name == "content-type" and value),
                DEFAULT_MIME_TYPE,
            )
            return FilePart(data=data, mime_type=mime_type)

        return None
