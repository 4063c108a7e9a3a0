from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

import numpy as np

from nss_lab import __version__
from nss_lab.config.loader import build_store, default_tenors, load_settings
from nss_lab.curves.nss import evaluate
from nss_lab.curves.schemas import PARAM_NAMES
from nss_lab.curves.validation import drop_non_finite, validate_curve_result
from nss_lab.data.feed import FeedError
from nss_lab.grids.tenors import TauPreset, dense_grid, format_tenors, get_preset, parse_tenors

LOGGER = logging.getLogger("nss_lab")


# ============================================================
# Helpers
# ============================================================


def _select_tenors(args, settings) -> np.ndarray:
    if getattr(args, "tenors", None):
        return parse_tenors(args.tenors, default=default_tenors(settings))
    if getattr(args, "preset", None):
        return get_preset(args.preset)
    return default_tenors(settings)


def _print_table(df) -> None:
    print(f"{'tenor':>10} {'spot %':>10} {'forward %':>10}")
    for row in df.itertuples(index=False):
        print(f"{row.tenor:>10.4f} {row.spot * 100:>10.4f} {row.forward * 100:>10.4f}")


# ============================================================
# Command: evaluate
# ============================================================


def cmd_evaluate(args):
    settings = load_settings(args.config)
    store = build_store(settings, use_feed=args.feed or None)

    curve_type = args.curve_type or settings.curve_type
    if args.date:
        params = store.get(curve_type, args.date)
        as_of = args.date
    else:
        snap = store.latest(curve_type)
        params, as_of = snap.params, snap.date

    overrides = {n: getattr(args, n) for n in PARAM_NAMES if getattr(args, n) is not None}
    if overrides:
        params = params.replace(**overrides)

    tenors = _select_tenors(args, settings)
    LOGGER.info("Evaluating %s (%s) on %d tenors", curve_type, as_of, len(tenors))

    result = evaluate(params, tenors)
    for msg in validate_curve_result(result):
        LOGGER.warning(msg)
    if args.drop_non_finite:
        result = drop_non_finite(result)

    df = result.to_frame()

    if args.out:
        out = Path(args.out)
        out.parent.mkdir(parents=True, exist_ok=True)
        df.to_csv(out, index=False)
        LOGGER.info("Saved curve to: %s", out)
        return

    if args.format == "csv":
        print(df.to_csv(index=False), end="")
    elif args.format == "json":
        payload = {
            "curve_type": curve_type,
            "date": as_of,
            "params": params.as_dict(),
            "points": result.to_records(),
        }
        # NaN / Infinity are emitted as-is (non-strict JSON)
        print(json.dumps(payload, indent=2))
    else:
        print(f"[nssl] {curve_type} @ {as_of}")
        _print_table(df)


# ============================================================
# Command: grid
# ============================================================


def cmd_grid(args):
    if args.tenors is not None:
        grid = parse_tenors(args.tenors)
    elif args.max_years is not None or args.points_per_year is not None:
        grid = dense_grid(
            10 if args.max_years is None else args.max_years,
            52 if args.points_per_year is None else args.points_per_year,
        )
    else:
        grid = get_preset(args.preset)
    print(format_tenors(grid))


# ============================================================
# Command: snapshots
# ============================================================


def cmd_snapshots(args):
    settings = load_settings(args.config)
    store = build_store(settings, use_feed=args.feed or None)

    print("[nssl] Available parameter snapshots:")
    for ct in store.curve_types():
        dates = store.dates(ct)
        print(f"  - {ct} : {len(dates)} snapshot(s), {dates[0]} … {dates[-1]}")


# ============================================================
# Command: version
# ============================================================


def cmd_version(args):
    print(__version__)


# ============================================================
# Main CLI
# ============================================================


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="nssl", description="NSS curve lab")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    presets = [p.value for p in TauPreset]

    # ------------------------------------------------------------------
    # evaluate
    # ------------------------------------------------------------------
    p_eval = sub.add_parser("evaluate", help="Evaluate spot / forward curves")
    p_eval.add_argument("--config", default=None, help="Path to settings YAML/JSON")
    p_eval.add_argument("--curve-type", default=None, help="Curve type (pre, ipca, ...)")
    p_eval.add_argument("--date", default=None, help="Snapshot date YYYY-MM-DD (default: latest)")
    for name in PARAM_NAMES:
        p_eval.add_argument(f"--{name}", type=float, default=None, help=f"Override {name}")
    grid_src = p_eval.add_mutually_exclusive_group()
    grid_src.add_argument("--tenors", default=None, help="Comma-separated tenors (years)")
    grid_src.add_argument("--preset", default=None, choices=presets)
    p_eval.add_argument("--feed", action="store_true", help="Merge the remote parameter feed")
    p_eval.add_argument("--drop-non-finite", action="store_true")
    p_eval.add_argument("--format", default="table", choices=["table", "csv", "json"])
    p_eval.add_argument("--out", default=None, help="Write CSV to this path")
    p_eval.set_defaults(func=cmd_evaluate)

    # ------------------------------------------------------------------
    # grid
    # ------------------------------------------------------------------
    p_grid = sub.add_parser("grid", help="Print a maturity grid")
    p_grid.add_argument("--preset", default=TauPreset.SMOOTH.value, choices=presets)
    p_grid.add_argument("--max-years", type=float, default=None)
    p_grid.add_argument("--points-per-year", type=int, default=None)
    p_grid.add_argument("--tenors", default=None, help="Free text to parse")
    p_grid.set_defaults(func=cmd_grid)

    # ------------------------------------------------------------------
    # snapshots
    # ------------------------------------------------------------------
    p_snap = sub.add_parser("snapshots", help="List parameter snapshots")
    p_snap.add_argument("--config", default=None)
    p_snap.add_argument("--feed", action="store_true")
    p_snap.set_defaults(func=cmd_snapshots)

    # ------------------------------------------------------------------
    # version
    # ------------------------------------------------------------------
    p_ver = sub.add_parser("version", help="Show version")
    p_ver.set_defaults(func=cmd_version)

    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        args.func(args)
    except (ValueError, KeyError, FileNotFoundError, FeedError) as e:
        LOGGER.error("%s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
