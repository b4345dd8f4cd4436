"""Decoder for the delimited text served by the spreadsheet export."""

import re
from typing import Iterator

RawRow = dict[str, str]

_HEADER_STRIP = re.compile(r'[\s"]+')


def normalize_header(name: str) -> str:
    """Lowercase a header cell and drop whitespace and quote characters."""
    return _HEADER_STRIP.sub("", name.strip().lower())


def split_fields(line: str) -> list[str]:
    """
    Split one data line on commas, honoring double-quoted sections.

    A quote toggles "inside quotes" mode and is itself dropped. Escaped
    quotes inside a quoted section are not recognized.
    """
    values: list[str] = []
    in_quotes = False
    current: list[str] = []

    for char in line:
        if char == '"':
            in_quotes = not in_quotes
        elif char == "," and not in_quotes:
            values.append("".join(current).strip())
            current = []
        else:
            current.append(char)
    values.append("".join(current).strip())

    return values


def _clean_value(value: str) -> str:
    value = value.strip()
    if value.startswith('"'):
        value = value[1:]
    if value.endswith('"'):
        value = value[:-1]
    return value


def iter_rows(text: str) -> Iterator[RawRow]:
    """
    Yield one RawRow per non-blank data line.

    The first non-blank line is the header. Missing trailing fields become
    empty strings and surplus fields are ignored; decoding never raises.

    Args:
        text: Raw export text

    Yields:
        Mapping of normalized header name to trimmed value
    """
    lines = (line for line in text.split("\n") if line.strip())

    header_line = next(lines, None)
    if header_line is None:
        return
    headers = [normalize_header(h) for h in header_line.split(",")]

    for line in lines:
        values = split_fields(line)
        row: RawRow = {}
        for i, header in enumerate(headers):
            row[header] = _clean_value(values[i]) if i < len(values) else ""
        yield row


def decode_rows(text: str) -> list[RawRow]:
    """Decode the whole export into a list of RawRow."""
    return list(iter_rows(text))
