"""Field normalization from decoded rows to participant records."""

import logging
import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Iterable, Optional

from wagerboard.exceptions import EmptySourceError
from wagerboard.models import ParticipantRecord
from .csv_decoder import RawRow

logger = logging.getLogger(__name__)

USERNAME_KEYS = ("username", "name", "player", "nama")
WAGERED_KEYS = ("totalwagered", "wagered", "amount", "jumlah", "total")
AVATAR_KEYS = ("avatarurl", "avatar", "image", "foto")

DEFAULT_USERNAME = "Anonymous"
# A data row equal to this token is a repeated header row
HEADER_TOKEN = "username"

_NUMERIC_CHARS = re.compile(r"^[\d,.]+$")
_NUMERIC_PREFIX = re.compile(r"\d+(?:\.\d*)?|\.\d+")
_TWO_PLACES = Decimal("0.01")


def get_value(row: RawRow, keys: Iterable[str]) -> str:
    """
    Return the value of the first column (in row order) whose name is one of `keys`.

    Matching is case-insensitive. Returns an empty string if no column matches.
    """
    wanted = {k.lower() for k in keys}
    for key, value in row.items():
        if key.lower() in wanted:
            return value
    return ""


def parse_number(value: str) -> Optional[Decimal]:
    """
    Parse a locale-ambiguous number.

    `.` is read as a thousands separator and the first `,` as the decimal
    point. Returns None unless the value is made only of digits, commas
    and dots and contains a parsable number.
    """
    if not _NUMERIC_CHARS.match(value):
        return None
    candidate = value.replace(".", "").replace(",", ".", 1)
    match = _NUMERIC_PREFIX.match(candidate)
    if not match:
        return None
    try:
        return Decimal(match.group(0))
    except InvalidOperation:
        return None


def normalize_number(value: str) -> str:
    """
    Reformat a numeric value with exactly two fraction digits.

    Examples:
        "1.234,56" -> "1234.56"
        "42"       -> "42.00"
        "abc"      -> "abc"
    """
    number = parse_number(value)
    if number is None:
        return value
    try:
        return str(number.quantize(_TWO_PLACES, rounding=ROUND_HALF_UP))
    except InvalidOperation:
        return value


def normalize_wagered(value: str) -> str:
    """Normalize a wagered cell, degrading unparsable values to 0.00."""
    normalized = normalize_number(value.strip()) if value else "0"
    try:
        amount = Decimal(normalized)
        if not amount.is_finite() or amount <= 0:
            amount = Decimal("0")
        return str(amount.quantize(_TWO_PLACES, rounding=ROUND_HALF_UP))
    except InvalidOperation:
        logger.debug(f"Unparsable wagered value {value!r}, using 0.00")
        return "0.00"


def normalize_row(row: RawRow) -> ParticipantRecord:
    """Build an unranked ParticipantRecord from a decoded row."""
    username = get_value(row, USERNAME_KEYS) or DEFAULT_USERNAME
    avatar = get_value(row, AVATAR_KEYS)
    wagered = normalize_wagered(get_value(row, WAGERED_KEYS))

    return ParticipantRecord(
        username=username,
        avatarUrl=avatar or None,
        wagered=wagered,
    )


def is_header_echo(record: ParticipantRecord) -> bool:
    """Check whether a record is a header row parsed as data."""
    return record.username.lower() == HEADER_TOKEN


def normalize_rows(rows: Iterable[RawRow]) -> list[ParticipantRecord]:
    """
    Normalize decoded rows into participant records, in fetch order.

    Raises:
        EmptySourceError: if no usable record remains
    """
    records = [
        record
        for record in (normalize_row(row) for row in rows)
        if not is_header_echo(record)
    ]
    if not records:
        raise EmptySourceError("Leaderboard is empty. Be the first to join!")
    return records
