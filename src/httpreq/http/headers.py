"""Header utilities.

Supports a simple key-value header file format and parsing of
Content-Disposition style header values.
"""

import re
from email.message import Message
from email.utils import collapse_rfc2231_value
from pathlib import Path
from typing import Dict, List, Tuple

# RFC 7230 token
_TOKEN = re.compile(r"^[!#$%&'*+.^_`|~0-9A-Za-z-]+$")


def load_headers_from_file(header_file: str) -> Dict[str, str]:
    """Load HTTP headers from file.

    File format is simple key: value pairs, one per line.

    Args:
        header_file: Path to header file

    Returns:
        Dictionary of header name to value

    Example file format:
        Accept: application/json
        Authorization: Bearer token123
        X-Custom-Header: value
    """
    headers = {}
    header_path = Path(header_file)

    if not header_path.exists():
        return headers

    with open(header_path, 'r') as f:
        for line in f:
            line = line.strip()

            # Skip comments and empty lines
            if not line or line.startswith('#'):
                continue

            if ':' in line:
                name, value = line.split(':', 1)
                headers[name.strip()] = value.strip()

    return headers


def parse_media_params(value: str, header: str = 'content-disposition') -> Tuple[str, Dict[str, str]]:
    """Parse a media-type style header value into its base type and parameters.

    Handles quoted values and RFC 2231 extended parameters
    (``filename*=UTF-8''na%C3%AFve.txt``). Every parameter must be
    ``name=value`` with a token name and a token or quoted-string value, and
    no name may repeat. A single trailing semicolon is ignored.

    Args:
        value: Raw header value, e.g. 'attachment; filename="x.bin"'
        header: Header name the value belongs to

    Returns:
        Tuple of (lower-cased base type, parameter dict with lower-cased keys)

    Raises:
        ValueError: If the base type is missing or invalid, or a parameter
            is malformed or repeated
    """
    segments = _split_params(value, header)

    base = segments[0].strip()
    if not _TOKEN.match(base):
        raise ValueError(f"invalid media type {base!r} in {header} value: {value!r}")

    _check_params(segments[1:], value, header)

    msg = Message()
    msg[header] = value

    result = {}
    for key, param in msg.get_params(header=header, unquote=True)[1:]:
        key = key.strip().lower()
        if not key:
            continue
        # Extended parameters come back as (charset, language, value)
        result[key] = collapse_rfc2231_value(param)

    return base.lower(), result


def _split_params(value: str, header: str) -> List[str]:
    """Split a header value on semicolons outside quoted strings."""
    segments = []
    current = []
    quoted = escaped = False

    for char in value:
        if escaped:
            escaped = False
        elif quoted and char == '\\':
            escaped = True
        elif char == '"':
            quoted = not quoted
        elif char == ';' and not quoted:
            segments.append(''.join(current))
            current = []
            continue
        current.append(char)

    if quoted:
        raise ValueError(f"unterminated quoted string in {header} value: {value!r}")

    segments.append(''.join(current))
    return segments


def _check_params(segments: List[str], value: str, header: str) -> None:
    seen = set()

    for index, segment in enumerate(segments):
        segment = segment.strip()
        if not segment:
            if index == len(segments) - 1:
                continue
            raise ValueError(f"empty parameter in {header} value: {value!r}")

        name, sep, raw = segment.partition('=')
        name = name.strip().lower()
        raw = raw.strip()

        if not sep or not _TOKEN.match(name):
            raise ValueError(f"invalid parameter {segment!r} in {header} value: {value!r}")

        if raw.startswith('"'):
            if len(raw) < 2 or not raw.endswith('"'):
                raise ValueError(f"invalid quoted value for {name!r} in {header} value: {value!r}")
        elif not _TOKEN.match(raw):
            raise ValueError(f"invalid value for {name!r} in {header} value: {value!r}")

        # filename and filename* are distinct names here; both may appear
        if name in seen:
            raise ValueError(f"duplicate parameter {name!r} in {header} value: {value!r}")
        seen.add(name)
