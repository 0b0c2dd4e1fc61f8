from __future__ import annotations

import argparse
import logging
import time

from .config import Config, pick_unit
from .parser import LineResult, parse_file, parse_line
from .report import build_report

LOGGER = logging.getLogger("shopping_list")

VERSION = "0.1.0"

BENCHMARK_LINE = "1 lb. Chicken Breasts, $4.99/lb."


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="shopping-list",
        description="Price a plain-text shopping list",
    )
    p.add_argument("--version", action="version", version=VERSION)
    p.add_argument("path", nargs="?", help="Shopping list file, one item per line")
    p.add_argument(
        "unit",
        nargs="?",
        help="Preferred display unit: oz, lb, kg or g (default: lb)",
    )
    p.add_argument("--json", metavar="PATH", help="Also write a JSON report to PATH")
    p.add_argument(
        "--benchmark",
        type=int,
        metavar="N",
        default=0,
        help="Time N parses of a sample line and exit",
    )
    p.add_argument("--quiet", action="store_true", help="Only log errors.")
    p.add_argument("--verbose", action="store_true", help="Verbose logging.")
    return p


def _setup_logging(args: argparse.Namespace, cfg: Config) -> None:
    level = getattr(logging, cfg.log_level, logging.WARNING)
    if args.quiet:
        level = logging.ERROR
    if args.verbose:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")


def run_benchmark(iterations: int) -> float:
    """Return the mean nanoseconds spent in parse_line over ``iterations`` runs."""
    # Warm-up
    for _ in range(min(iterations, 1000)):
        parse_line(BENCHMARK_LINE)

    t1 = time.perf_counter_ns()
    for _ in range(iterations):
        parse_line(BENCHMARK_LINE)
    t2 = time.perf_counter_ns()
    return (t2 - t1) / iterations


def _log_failures(results: list[LineResult]) -> None:
    for r in results:
        if r.error is not None:
            LOGGER.warning('Failed to parse line "%s": %s; ignoring', r.line, r.error)


def main(argv: list[str] | None = None) -> int:
    p = build_parser()
    args = p.parse_args(argv)

    cfg = Config.load_from_env()
    _setup_logging(args, cfg)

    if args.benchmark > 0:
        ns = run_benchmark(args.benchmark)
        print(f"parse_line: {ns:.2f}ns")
        return 0

    if args.path is None:
        p.error("the following arguments are required: path")

    preferred = pick_unit(args.unit) if args.unit is not None else cfg.preferred_unit

    try:
        results = list(parse_file(args.path))
    except (OSError, UnicodeDecodeError) as exc:
        LOGGER.error("Failed to open file %s: %s", args.path, exc)
        return 1

    _log_failures(results)

    report = build_report(results, preferred=preferred)
    print(report.summary_text())

    report_path = args.json or cfg.report_path
    if report_path:
        path = report.write_json(report_path)
        LOGGER.info("Report written to %s", path)

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
