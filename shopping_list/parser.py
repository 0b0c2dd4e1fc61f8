from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator

from .models import ShoppingListItem
from .units import GRAM_PER_KG, CountType

LOGGER = logging.getLogger(__name__)

_DIGITS = frozenset("0123456789")

# Largest factor a count or price is scaled by: kilograms to grams, then display rounding.
_MAX_SCALE = GRAM_PER_KG * 100

# Longer tokens first so "lbs" wins over "lb" and "kg" over "g".
_UNIT_TOKENS: tuple[tuple[str, CountType], ...] = (
    ("lbs", CountType.POUND),
    ("lb", CountType.POUND),
    ("oz", CountType.OUNCE),
    ("kg", CountType.KILOGRAM),
    ("g", CountType.GRAM),
)

# "ea" only ever appears after a price, e.g. "$1.25/ea."
_PER_UNIT_TOKENS = _UNIT_TOKENS + (("ea", CountType.QUANTITY),)


class ParseError(ValueError):
    """A shopping list line did not match the grammar."""

    reason = "Malformed shopping list line"

    def __init__(self, detail: str | None = None):
        self.detail = detail
        super().__init__(f"{self.reason}: {detail}" if detail else self.reason)


class ExpectedLeadingNumber(ParseError):
    reason = "Expected string to start with a number"


class ExpectedTrailingNumber(ParseError):
    reason = "Expected string to end with a number"


class ExpectedPriceNumber(ExpectedTrailingNumber):
    reason = "Expected a price of the form <dollars>.<cents>"


class ExpectedSlashBeforePrice(ParseError):
    reason = "Expected slash before price"


class ExpectedDollarSign(ParseError):
    reason = "Expected dollar sign before price"


class ExpectedUnitCount(ParseError):
    reason = "Expected unit count before price"


class ExpectedComma(ParseError):
    reason = "Expected comma before price"


class ExpectedUnitAfterQuantity(ParseError):
    reason = "Expected a unit of measurement after the quantity"


class ExpectedSpaceAfterUnit(ParseError):
    reason = "Expected space after the unit of measurement"


class NumericConversionFailed(ParseError):
    reason = "Failed to convert number"


class EmptyName(ParseError):
    reason = "Expected an item name"


class _Cursor:
    """A [start, end) window over one line, narrowed from both ends."""

    def __init__(self, text: str):
        self.text = text
        self.start = 0
        self.end = len(text)

    def __len__(self) -> int:
        return self.end - self.start

    @property
    def rest(self) -> str:
        return self.text[self.start:self.end]

    def char_at(self, i: int) -> str:
        return self.text[i]

    def ends_with(self, token: str) -> bool:
        return len(token) <= len(self) and self.text.endswith(token, self.start, self.end)

    def starts_with(self, token: str) -> bool:
        return len(token) <= len(self) and self.text.startswith(token, self.start, self.end)

    def drop_back(self, n: int) -> None:
        self.end -= n

    def drop_front(self, n: int) -> None:
        self.start += n

    def strip_back(self, token: str) -> bool:
        if self.ends_with(token):
            self.drop_back(len(token))
            return True
        return False

    def strip_front(self, token: str) -> bool:
        if self.starts_with(token):
            self.drop_front(len(token))
            return True
        return False


def _is_digit(c: str) -> bool:
    # ASCII only; "²".isdigit() is True.
    return c in _DIGITS


def _describe(digits: str) -> str:
    if len(digits) > 20:
        return f"{len(digits)}-digit number"
    return repr(digits)


def _to_int(digits: str) -> int:
    # int() refuses very long digit strings (sys.get_int_max_str_digits).
    try:
        return int(digits)
    except ValueError as exc:
        raise NumericConversionFailed(_describe(digits)) from exc


def _to_float(digits: str) -> float:
    try:
        value = float(digits)
    except ValueError as exc:
        raise NumericConversionFailed(_describe(digits)) from exc
    if not math.isfinite(value):
        raise NumericConversionFailed(f"{_describe(digits)} is out of range")
    return value


def _check_in_range(price_cents_per_unit: int, count: float, per_unit_count: int) -> None:
    """Make sure pricing and display arithmetic on these numbers stays finite."""
    try:
        values = (
            float(price_cents_per_unit) * count * _MAX_SCALE,
            float(price_cents_per_unit) * _MAX_SCALE,
            count * _MAX_SCALE,
            float(per_unit_count) * _MAX_SCALE,
        )
    except OverflowError as exc:
        raise NumericConversionFailed("number is out of range") from exc
    if not all(math.isfinite(v) for v in values):
        raise NumericConversionFailed("number is out of range")


def _match_unit_back(cur: _Cursor, tokens: tuple[tuple[str, CountType], ...]) -> CountType | None:
    for token, count_type in tokens:
        if cur.strip_back(token):
            return count_type
    return None


def _match_unit_front(cur: _Cursor, tokens: tuple[tuple[str, CountType], ...]) -> CountType | None:
    for token, count_type in tokens:
        if cur.strip_front(token):
            return count_type
    return None


def _take_leading_decimal(cur: _Cursor) -> float:
    """Consume a number like '2' or '2.5' from the front of the cursor.

    Leaves the cursor untouched when it raises.
    """
    length = 0
    seen_point = False
    for i in range(cur.start, cur.end):
        c = cur.char_at(i)
        if not c.isascii():
            raise ExpectedLeadingNumber(f"unexpected character {c!r}")
        if _is_digit(c):
            length += 1
        elif c == ".":
            if seen_point:
                raise ExpectedLeadingNumber("too many decimal points")
            if length == 0:
                raise ExpectedLeadingNumber()
            seen_point = True
            length += 1
        elif length == 0:
            raise ExpectedLeadingNumber()
        else:
            break

    if length == 0:
        raise ExpectedLeadingNumber()

    value = _to_float(cur.text[cur.start:cur.start + length])
    cur.drop_front(length)
    return value


def _take_trailing_price(cur: _Cursor) -> int:
    """Consume '<whole>.<fraction>' from the back and combine it into cents.

    The fraction is added as written, so '4.9' gives 409, not 490.
    """
    fraction_len = 0
    whole_len = 0
    seen_point = False
    for i in range(cur.end - 1, cur.start - 1, -1):
        c = cur.char_at(i)
        if _is_digit(c):
            if seen_point:
                whole_len += 1
            else:
                fraction_len += 1
        elif c == ".":
            if seen_point:
                raise ExpectedPriceNumber("too many decimal points")
            if fraction_len == 0:
                raise ExpectedPriceNumber()
            seen_point = True
        elif fraction_len == 0:
            raise ExpectedPriceNumber()
        else:
            break

    if fraction_len == 0 or whole_len == 0:
        raise ExpectedPriceNumber()

    fraction = _to_int(cur.text[cur.end - fraction_len:cur.end])
    cur.drop_back(fraction_len + 1)
    whole = _to_int(cur.text[cur.end - whole_len:cur.end])
    cur.drop_back(whole_len)
    return whole * 100 + fraction


def _take_trailing_int(cur: _Cursor) -> int | None:
    """Consume a run of digits from the back, or return None if there is none."""
    length = 0
    for i in range(cur.end - 1, cur.start - 1, -1):
        if not _is_digit(cur.char_at(i)):
            break
        length += 1

    if length == 0:
        return None

    value = _to_int(cur.text[cur.end - length:cur.end])
    cur.drop_back(length)
    return value


def parse_line(line: str) -> ShoppingListItem:
    """Parse one shopping list line.

    Understands three shapes::

        2 lb. Chicken Breasts, $4.99/lb.
        Corn Chex, $2.79
        10 Sweet Corn, 5/$2.00

    Raises a ``ParseError`` subclass describing the first thing that did
    not match.
    """
    cur = _Cursor(line)

    # Tail: "[, ][K/]$D.CC[/[N][unit]][.]"
    cur.strip_back(".")

    per_unit_count_type = _match_unit_back(cur, _PER_UNIT_TOKENS)
    has_per_unit_count_type = per_unit_count_type is not None
    if per_unit_count_type is None:
        per_unit_count_type = CountType.QUANTITY

    cur.strip_back(" ")

    per_unit_count = 1
    if has_per_unit_count_type:
        n = _take_trailing_int(cur)
        if n is not None:
            per_unit_count = n
        if not cur.strip_back("/"):
            raise ExpectedSlashBeforePrice()

    price_cents_per_unit = _take_trailing_price(cur)

    if not cur.strip_back("$"):
        raise ExpectedDollarSign()

    # Bulk quantity pricing, e.g. "5/$2.00".
    if not has_per_unit_count_type and cur.strip_back("/"):
        n = _take_trailing_int(cur)
        if n is None:
            raise ExpectedUnitCount()
        per_unit_count = n
        per_unit_count_type = CountType.QUANTITY

    cur.strip_back(" ")
    if not cur.strip_back(","):
        raise ExpectedComma()

    # Head: "[count][ ][unit[.] ]name"
    expects_quantity = per_unit_count_type is CountType.QUANTITY or per_unit_count != 1
    if expects_quantity:
        try:
            count = _take_leading_decimal(cur)
        except ExpectedLeadingNumber:
            LOGGER.debug("No leading quantity in %r; assuming 1", line)
            count = 1.0
    else:
        count = _take_leading_decimal(cur)

    cur.strip_front(" ")

    count_type = _match_unit_front(cur, _UNIT_TOKENS)
    if count_type is None:
        if not count.is_integer():
            raise ExpectedUnitAfterQuantity(f"{count:g}")
        count_type = CountType.QUANTITY

    if count_type is not CountType.QUANTITY:
        cur.strip_front(".")
        if not cur.strip_front(" "):
            raise ExpectedSpaceAfterUnit()

    name = cur.rest
    if not name:
        raise EmptyName()
    if per_unit_count < 1:
        raise ExpectedUnitCount(f"unit count must be at least 1, got {per_unit_count}")
    _check_in_range(price_cents_per_unit, count, per_unit_count)

    return ShoppingListItem(
        name=name,
        price_cents_per_unit=price_cents_per_unit,
        count=count,
        count_type=count_type,
        per_unit_count=per_unit_count,
        per_unit_count_type=per_unit_count_type,
    )


def is_skippable(line: str) -> bool:
    """Blank lines and '//' comments carry no item."""
    return not line or line.startswith("//")


@dataclass(frozen=True)
class LineResult:
    line_no: int
    line: str
    item: ShoppingListItem | None = None
    error: ParseError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def parse_lines(lines: Iterable[str]) -> Iterator[LineResult]:
    """Parse every non-skippable line, yielding a result per line instead of raising."""
    for line_no, raw in enumerate(lines, 1):
        line = raw.rstrip("\r\n")
        if is_skippable(line):
            continue
        try:
            item = parse_line(line)
        except ParseError as exc:
            yield LineResult(line_no=line_no, line=line, error=exc)
            continue
        yield LineResult(line_no=line_no, line=line, item=item)


def parse_file(path: str | Path) -> Iterator[LineResult]:
    with Path(path).open(encoding="utf-8-sig") as fh:
        yield from parse_lines(fh)
