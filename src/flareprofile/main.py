"""
Command-Line Entry
==================
Computes the flare trajectory for one or all vertical speed models and prints
the sampled key points as a table.

Usage:
    $ python -m flareprofile --model exponential
    $ python -m flareprofile --initial-speed 140 --touchdown-speed 134 --plot
"""
from __future__ import annotations

import argparse
import logging
from typing import List, Sequence

from flareprofile.logging_config import setup_logging
from flareprofile.model.computer import FlareProfileComputer
from flareprofile.model.models import FlareModel
from flareprofile.model.points import TrajectoryPoint

logger = logging.getLogger(__name__)

ALL_MODELS = "all"


def _build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="flareprofile",
        description="Fit vertical speed profiles to a landing flare and sample the trajectory.",
    )
    ap.add_argument("--initial-speed", type=float, default=150.0,
                    help="Ground speed at flare start (kt)")
    ap.add_argument("--touchdown-speed", type=float, default=145.0,
                    help="Ground speed at touchdown (kt)")
    ap.add_argument("--flight-path-angle", type=float, default=-3.0,
                    help="Flight path angle at flare start (deg, negative when descending)")
    ap.add_argument("--touchdown-vertical-speed", type=float, default=-150.0,
                    help="Vertical speed at touchdown (ft/min, negative)")
    ap.add_argument("--touchdown-distance", type=float, default=2000.0,
                    help="Touchdown point measured from flare start (ft)")
    ap.add_argument("--flare-height", type=float, default=50.0,
                    help="Height above the runway at flare start (ft)")
    ap.add_argument("--model", default=ALL_MODELS,
                    help=f"Model name ({', '.join(m.name.lower() for m in FlareModel)}) or '{ALL_MODELS}'")
    ap.add_argument("--plot", action="store_true", help="Plot the fitted vertical speed profiles")
    ap.add_argument("--log-level", default="WARNING",
                    choices=["DEBUG", "INFO", "WARNING", "ERROR"], help="Logging level")
    ap.add_argument("--log-file", default=None, help="Optional path of a log file")
    return ap


def _select_models(name: str) -> List[FlareModel]:
    if name.strip().lower() == ALL_MODELS:
        return list(FlareModel)
    return [FlareModel.from_name(name)]


def format_points(points: Sequence[TrajectoryPoint]) -> str:
    """Render trajectory points as a fixed-width table."""
    header = f"{'t (s)':>8} {'dist (ft)':>10} {'height (ft)':>12} {'gs (kt)':>9} {'vs (ft/min)':>12} {'fpa (deg)':>10}"
    lines = [header, "-" * len(header)]
    for p in points:
        lines.append(
            f"{p.elapsed_seconds:8.2f} {p.lateral_position:10.1f} {p.height:12.2f} "
            f"{p.lateral_speed_knots:9.2f} {p.vertical_rate:12.1f} {p.flight_path_angle_degrees:10.2f}"
        )
    return "\n".join(lines)


def main(argv: List[str] | None = None) -> int:
    ap = _build_parser()
    args = ap.parse_args(argv)

    setup_logging(level=getattr(logging, args.log_level), log_file=args.log_file)

    try:
        models = _select_models(args.model)
    except ValueError as e:
        ap.error(str(e))

    computer = FlareProfileComputer.from_knots(
        initial_speed_knots=args.initial_speed,
        touchdown_speed_knots=args.touchdown_speed,
        initial_flight_path_angle=args.flight_path_angle,
        touchdown_vertical_speed=args.touchdown_vertical_speed,
        touchdown_distance=args.touchdown_distance,
        flare_height=args.flare_height,
    )
    total_time = computer.total_flare_time
    logger.info(f"Total flare time {total_time * 60:.2f} s for {computer}")

    status = 0
    for model in models:
        curve = computer.vertical_profile(model, total_time)
        print(f"\n{model.value} ({model.description})")
        if not curve.is_valid:
            print("  no solution for these inputs")
            status = 1
            continue

        params = ", ".join(f"{name}={value:.6g}" for name, value in curve.parameters.items())
        print(f"  {params}")
        print(format_points(computer.key_points(model)))

        if args.plot:
            curve.plot()

    return status
