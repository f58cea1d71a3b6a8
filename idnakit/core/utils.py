"""
Utility functions: chứa các hàm dùng chung cho xử lý tên miền và dữ liệu Unicode.
Mục tiêu: tái sử dụng, giảm lặp code giữa bảng ánh xạ, thuộc tính Unicode và CLI.
"""
import re
from typing import Iterator, List, Tuple

from idnakit.core.errors import TableError

# Domain processing
MAX_LABEL_LENGTH = 63
MAX_DOMAIN_LENGTH = 253

_SEPARATOR_RE = re.compile("[.。．｡]")
_CODEPOINT_RE = re.compile(r'^(?:U\+|0x|\\u|\\x)?([0-9A-Fa-f]{1,6})$')


def split_labels(domain: str) -> List[str]:
    """
    Split a domain name on every IDNA label separator.

    Args:
        domain: Domain name (e.g., 'bücher。example')

    Returns:
        List of labels; empty labels are preserved (e.g., ['a', '', 'b'] for 'a..b')
    """
    return _SEPARATOR_RE.split(domain)


def is_valid_label_length(label: str) -> bool:
    """DNS label length check (1..63 octets of ASCII)"""
    return 1 <= len(label) <= MAX_LABEL_LENGTH


def is_valid_domain_length(domain: str) -> bool:
    """
    DNS name length check.

    A single trailing dot (the root label) does not count toward the limit.

    Args:
        domain: ASCII domain name

    Returns:
        bool: True if the name is 1..253 octets long
    """
    if domain.endswith('.'):
        domain = domain[:-1]
    return 1 <= len(domain) <= MAX_DOMAIN_LENGTH


# Parsing helpers
def parse_comma_separated(value: str) -> List[str]:
    """
    Parse a comma-separated CLI value into a list of non-empty items.

    Args:
        value: Raw value (e.g., 'U+00DF, 0x200D,ß')

    Returns:
        List of stripped items in input order, duplicates removed
    """
    items = []
    for item in value.split(','):
        item = item.strip()
        if item and item not in items:
            items.append(item)
    return items


def parse_codepoint(value: str) -> int:
    """
    Parse a code point written as 'U+00DF', '0xDF', '\\u00DF', 'DF' or a single character.

    A single character is always taken literally; longer values are hexadecimal.

    Raises:
        ValueError: If the value is not a code point in 0..0x10FFFF
    """
    if len(value) == 1:
        return ord(value)

    value = value.strip()
    match = _CODEPOINT_RE.match(value)
    if match:
        cp = int(match.group(1), 16)
    else:
        raise ValueError(f"Not a code point: {value!r}")
    if cp > 0x10FFFF:
        raise ValueError(f"Code point out of range: {value!r}")
    return cp


def parse_codepoint_range(field: str) -> Tuple[int, int]:
    """Parse a UCD range field ('00DF' or '0041..005A')"""
    try:
        if '..' in field:
            a, b = field.split('..', 1)
            return int(a, 16), int(b, 16)
        cp = int(field, 16)
    except ValueError:
        raise TableError(f"Invalid code point range: {field!r}") from None
    return cp, cp


def iter_ucd_records(text: str) -> Iterator[Tuple[int, int, List[str]]]:
    """
    Iterate over the records of a UCD-style data file.

    Comments start with '#'. Fields are separated by ';' and stripped.

    Yields:
        (start, end, remaining_fields) for every non-empty line
    """
    for lineno, raw in enumerate(text.splitlines(), 1):
        line = raw.split('#', 1)[0].strip()
        if not line:
            continue

        parts = [part.strip() for part in line.split(';')]
        if len(parts) < 2:
            raise TableError(f"Line {lineno}: expected 'range ; value', got {raw!r}")

        start, end = parse_codepoint_range(parts[0])
        yield start, end, parts[1:]


def read_version(text: str) -> str:
    """Return the value of the '# Version:' header of a data file, or 'unknown'"""
    match = re.search(r'^#\s*Version:\s*(\S+)', text, re.MULTILINE)
    return match.group(1) if match else "unknown"
