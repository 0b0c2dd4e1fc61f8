import json

from shopping_list.parser import parse_line, parse_lines
from shopping_list.report import build_report, build_row, format_money
from shopping_list.units import Unit

LINES = [
    "2 lb. Chicken Breasts, $4.99/lb.",
    "10 Sweet Corn, 5/$2.00",
    "Corn Chex, $2.79",
]


def _row(line, preferred=Unit.POUND):
    return build_row(parse_line(line), preferred)


def test_format_money():
    assert format_money(1677) == "16.77"
    assert format_money(0) == "0.00"
    assert format_money(5) == "0.05"
    assert format_money(123456) == "1,234.56"
    assert format_money(100000000) == "1,000,000.00"


def test_weight_row_in_pounds():
    row = _row("2 lb. Chicken Breasts, $4.99/lb.")
    assert row.count_text == "2 lb."
    assert row.total_cents == 998
    assert row.per_unit_text == "@ $4.99 / lb."


def test_weight_row_in_kilograms():
    row = _row("2 lb. Chicken Breasts, $4.99/lb.", Unit.KILOGRAM)
    assert row.count_text == "0.91 kg."
    assert row.per_unit_text == "@ $11.00 / kg."
    # The total never depends on the display unit.
    assert row.total_cents == 998


def test_weight_row_in_ounces_keeps_pound_price():
    row = _row("2 lb. Chicken Breasts, $4.99/lb.", Unit.OUNCE)
    assert row.count_text == "32 oz."
    assert row.per_unit_text == "@ $4.99 / lb."


def test_bulk_row():
    row = _row("10 Sweet Corn, 5/$2.00")
    assert row.count_text == "10"
    assert row.per_unit_text == "@ 5 / $2.00"
    assert row.total_cents == 400


def test_simple_row():
    row = _row("Corn Chex, $2.79")
    assert row.count_text == "1"
    assert row.per_unit_text == "@ $2.79 / ea."


def test_multi_unit_row():
    assert _row("3 lbs. Apples, $5.00/3lb.").per_unit_text == "@ $5.00 / 3 lb."

    row = _row("3 lbs. Apples, $5.00/3lb.", Unit.KILOGRAM)
    assert row.count_text == "1.36 kg."
    assert row.per_unit_text == "@ $5.00 / 1.36 kg."


def test_render_columns():
    row = _row("2 lb. Chicken Breasts, $4.99/lb.")
    assert row.render() == "Chicken Breasts     2 lb.     $9.98     @ $4.99 / lb."


def test_render_does_not_truncate_long_names():
    row = _row("A Very Long Product Name Indeed, $1.00")
    assert row.render().startswith("A Very Long Product Name Indeed1")


def test_summary_text():
    report = build_report(parse_lines(LINES), preferred=Unit.POUND)
    text = report.summary_text()

    assert report.total_cents == 1677
    assert text.splitlines()[0].startswith("Chicken Breasts")
    assert text.endswith("\n\nTotal: $16.77")


def test_summary_text_empty():
    report = build_report([], preferred=Unit.POUND)
    assert report.summary_text() == "\nTotal: $0.00"


def test_failures_are_excluded_from_total():
    lines = LINES + ["2 lb. Chicken, 4.99/lb."]
    report = build_report(parse_lines(lines), preferred=Unit.POUND)

    assert report.total_cents == 1677
    assert len(report.items) == 3
    assert len(report.failures) == 1
    assert report.failures[0].line_no == 4
    assert "dollar sign" in report.failures[0].reason


def test_write_json(tmp_path):
    report = build_report(parse_lines(LINES), preferred=Unit.KILOGRAM)
    path = report.write_json(str(tmp_path / "out" / "report.json"))

    data = json.loads((tmp_path / "out" / "report.json").read_text())
    assert path.endswith("report.json")
    assert data["total_cents"] == 1677
    assert data["preferred_unit"] == "kg"
    assert data["items"][0]["item"]["count_type"] == "lb"
    assert data["items"][1]["item"]["per_unit_count"] == 5


def test_out_of_range_line_does_not_stop_the_report():
    lines = ["1" * 400 + " lb. Rice, $1.00/lb."] + LINES
    report = build_report(parse_lines(lines), preferred=Unit.KILOGRAM)

    assert len(report.items) == 3
    assert report.total_cents == 1677
    assert report.failures[0].line_no == 1
    assert "out of range" in report.failures[0].reason
