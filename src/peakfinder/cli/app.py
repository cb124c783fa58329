"""Command-line interface for peakfinder using argparse."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Optional

from peakfinder.analysis.peak_search import PeakSearchConfig, analyze_peaks
from peakfinder.analysis.smoothing import SMOOTHING_METHODS, SmoothingConfig
from peakfinder.io.export import export_spectrum, write_peaks
from peakfinder.io.readers import read_two_column

logger = logging.getLogger(__name__)


def _smoothing_from_args(args: argparse.Namespace, method: str) -> SmoothingConfig:
    return SmoothingConfig(
        method=method,
        window_size=args.window_size,
        polynomial_order=args.polynomial_order,
        sigma=args.sigma,
    )


def cmd_smooth(args: argparse.Namespace) -> None:
    spectrum = read_two_column(args.input, log_values=not args.no_log)
    smoothing = _smoothing_from_args(args, args.method)
    smoothed = spectrum.with_values(smoothing.apply(spectrum.values))

    output = args.output or Path(f"Smoothed_{args.input.stem}.dat")
    export_spectrum(smoothed, output)
    print(f"Wrote smoothed spectrum to {output}")


def cmd_find(args: argparse.Namespace) -> None:
    spectrum = read_two_column(args.input, log_values=not args.no_log)
    smoothing = _smoothing_from_args(args, args.smooth)
    smoothed = spectrum.with_values(smoothing.apply(spectrum.values))

    config = PeakSearchConfig(max_workers=args.workers, normalized_output=args.normalized)
    result = analyze_peaks(smoothed.positions, smoothed.values, args.half_width, config)

    if args.json:
        print(json.dumps(
            [{"position": p.position, "method": p.method.value,
              "start_index": p.region.start_inclusive, "end_index": p.region.end_inclusive}
             for p in result.peaks],
            indent=2,
        ))
    else:
        for position in result.positions:
            print(f"{position:.6f}")

    if args.output:
        write_peaks(args.output, result.positions)
    if args.plot:
        from peakfinder.plots.peaks import save_peak_plot

        plotted = result.positions
        if args.normalized:
            plotted = list(result.scaling.unscale(plotted)) if plotted else []
        save_peak_plot(smoothed, plotted, args.plot, title=args.input.name)
        logger.info("Saved peak plot to %s", args.plot)


def _add_smoothing_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--window-size", type=int, default=5, help="Savitzky-Golay window (odd)")
    parser.add_argument("--polynomial-order", type=int, default=2, help="Savitzky-Golay polynomial order")
    parser.add_argument("--sigma", type=float, default=1.0, help="Gaussian kernel sigma (samples)")
    parser.add_argument("--no-log", action="store_true", help="Do not log10-transform values on read")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Sub-sample peak localization for sampled curves")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Increase log verbosity")
    subparsers = parser.add_subparsers(dest="command", required=True)

    smooth = subparsers.add_parser("smooth", help="Smooth a two-column spectrum file")
    smooth.add_argument("input", type=Path)
    smooth.add_argument("--method", choices=["savgol", "gaussian"], default="savgol")
    smooth.add_argument("--output", type=Path)
    _add_smoothing_arguments(smooth)
    smooth.set_defaults(func=cmd_smooth)

    find = subparsers.add_parser("find", help="Locate peaks in a two-column spectrum file")
    find.add_argument("input", type=Path)
    find.add_argument("--half-width", type=int, default=2, help="Half-width of the local fit windows")
    find.add_argument("--smooth", choices=list(SMOOTHING_METHODS), default="none")
    find.add_argument("--workers", type=int, help="Threads for the derivative passes")
    find.add_argument("--normalized", action="store_true", help="Report positions in the [0, 1] domain")
    find.add_argument("--json", action="store_true", help="Print peaks as JSON")
    find.add_argument("--output", type=Path, help="Write peak positions to this file")
    find.add_argument("--plot", type=Path, help="Save a diagnostic plot to this image file")
    _add_smoothing_arguments(find)
    find.set_defaults(func=cmd_find)

    return parser


def _configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def main(argv: Optional[list[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)
    args.func(args)


if __name__ == "__main__":
    main()
