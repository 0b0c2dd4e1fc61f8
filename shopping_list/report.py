from __future__ import annotations

import json
from dataclasses import dataclass, asdict
from datetime import datetime, timezone
from decimal import Decimal
from pathlib import Path
from typing import Iterable

from .models import ShoppingListItem
from .parser import LineResult
from .pricing import converted_per_unit, display_weight, grand_total_cents, total_price_cents
from .units import Unit, convert_weight

NAME_WIDTH = 20
COUNT_WIDTH = 10
PRICE_WIDTH = 10
PER_UNIT_WIDTH = 24


def format_money(cents: int) -> str:
    """'1677' -> '16.77', '123456' -> '1,234.56' (en_US grouping, two places)."""
    return f"{Decimal(cents).scaleb(-2):,.2f}"


def _count_text(item: ShoppingListItem, preferred: Unit) -> str:
    unit = item.count_type.unit
    if unit is None:
        return f"{item.count:g}"
    weight = convert_weight(item.count, unit, preferred)
    return f"{display_weight(weight, preferred):g} {preferred.label}."


def _per_unit_text(item: ShoppingListItem, preferred: Unit) -> str:
    price = item.price_cents_per_unit
    per_unit_unit = item.per_unit_count_type.unit

    if per_unit_unit is not None:
        conv = converted_per_unit(item.per_unit_count, per_unit_unit, price, preferred)
        n = conv.per_unit_count
        if n.is_integer():
            count_part = f"{int(n)} " if n > 1 else ""
        else:
            count_part = f"{display_weight(n, conv.unit):g} "
        return f"@ ${format_money(conv.price_cents_per_unit)} / {count_part}{conv.unit.label}."

    if item.per_unit_count != 1:
        return f"@ {item.per_unit_count} / ${format_money(price)}"
    return f"@ ${format_money(price)} / {item.per_unit_count_type.label}."


@dataclass
class ItemReport:
    line_no: int
    raw: str
    name: str
    count_text: str
    total_cents: int
    per_unit_text: str
    item: dict

    def render(self) -> str:
        row = (
            f"{self.name:<{NAME_WIDTH}}"
            f"{self.count_text:<{COUNT_WIDTH}}"
            f"{'$' + format_money(self.total_cents):<{PRICE_WIDTH}}"
            f"{self.per_unit_text:<{PER_UNIT_WIDTH}}"
        )
        return row.rstrip()


@dataclass
class FailedLine:
    line_no: int
    raw: str
    reason: str


@dataclass
class RunReport:
    timestamp: str
    preferred_unit: str
    total_cents: int
    items: list[ItemReport]
    failures: list[FailedLine]

    def summary_text(self) -> str:
        lines = [it.render() for it in self.items]
        lines.append("")
        lines.append(f"Total: ${format_money(self.total_cents)}")
        return "\n".join(lines)

    def write_json(self, path: str = "artifacts/shopping_list_report.json") -> str:
        out = Path(path)
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(json.dumps(asdict(self), indent=2))
        return str(out)


def build_row(item: ShoppingListItem, preferred: Unit, *, line_no: int = 0, raw: str = "") -> ItemReport:
    return ItemReport(
        line_no=line_no,
        raw=raw,
        name=item.name,
        count_text=_count_text(item, preferred),
        total_cents=total_price_cents(item),
        per_unit_text=_per_unit_text(item, preferred),
        item=item.model_dump(mode="json"),
    )


def build_report(results: Iterable[LineResult], *, preferred: Unit) -> RunReport:
    parsed: list[ShoppingListItem] = []
    items: list[ItemReport] = []
    failures: list[FailedLine] = []
    for r in results:
        if r.item is None:
            failures.append(FailedLine(line_no=r.line_no, raw=r.line, reason=str(r.error)))
            continue
        parsed.append(r.item)
        items.append(build_row(r.item, preferred, line_no=r.line_no, raw=r.line))

    return RunReport(
        timestamp=datetime.now(timezone.utc).isoformat(),
        preferred_unit=preferred.label,
        total_cents=grand_total_cents(parsed),
        items=items,
        failures=failures,
    )
