"""CLI entry point for cloud-immersion."""

import argparse
import logging
import sys

from pydantic import ValidationError

from cloud_immersion.config import (
    CLOUDY_THRESHOLD,
    DEFAULT_INPUT_CSV,
    DEFAULT_K_RS,
    DEFAULT_LATITUDE_DEG,
    ROLLING_WINDOW_DAYS,
    PipelineConfig,
)

logger = logging.getLogger("cloud_immersion")


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="cloud-immersion",
        description="Daily weather -> dew point, cloud base, radiation and cloud immersion by elevation",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    subparsers = parser.add_subparsers(dest="command")

    # derive subcommand
    derive_parser = subparsers.add_parser("derive", help="Derive features and write them as CSV")
    _add_common_arguments(derive_parser)
    derive_parser.add_argument("--output", help="Output CSV (default: print a summary only)")

    # profile subcommand
    profile_parser = subparsers.add_parser("profile", help="Print percent of days immersed per elevation band")
    _add_common_arguments(profile_parser)

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    try:
        config = PipelineConfig(
            latitude_deg=args.latitude,
            k_rs=args.k_rs,
            cloudy_threshold=args.threshold,
            rolling_window_days=args.window,
        )
        if args.command == "derive":
            _derive(args, config)
        elif args.command == "profile":
            _profile(args, config)
    except ValidationError as e:
        logger.error("Invalid configuration: %s", e)
        sys.exit(1)
    except (FileNotFoundError, ValueError) as e:
        logger.error("%s", e)
        sys.exit(1)


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--input", default=str(DEFAULT_INPUT_CSV), help="NASA POWER daily CSV")
    parser.add_argument("--skiprows", type=int, default=None, help="Header lines to skip (default: detect)")
    parser.add_argument("--latitude", type=float, default=DEFAULT_LATITUDE_DEG, help="Site latitude (deg)")
    parser.add_argument("--k-rs", type=float, default=DEFAULT_K_RS, help="Hargreaves coefficient")
    parser.add_argument("--threshold", type=float, default=CLOUDY_THRESHOLD, help="Cloudy-day Kt threshold")
    parser.add_argument("--window", type=int, default=ROLLING_WINDOW_DAYS, help="Rolling window (days)")


def _derive(args: argparse.Namespace, config: PipelineConfig) -> None:
    from cloud_immersion.compute.rolling import rolling_immersion_pct
    from cloud_immersion.pipeline import run_file, to_flat_frame

    result = run_file(args.input, config, skiprows=args.skiprows)
    flat = to_flat_frame(result)

    if args.output:
        flat.to_csv(args.output, index=False)
        logger.info("Wrote %d rows to %s", len(flat), args.output)
        return

    rolled = rolling_immersion_pct(result.immersion, config.rolling_window_days)
    print(f"Days: {len(flat)}")
    print(f"Cloudy days: {int(result.derived['is_cloudy'].sum())}")
    print(f"Mean cloud base: {result.derived['cloud_base_m'].mean():.0f} m")
    print(f"Low-confidence dew point days (RH < 50%): {int(flat['low_confidence_dew_point'].sum())}")
    if not rolled.empty:
        print("Latest rolling immersion (%):")
        print(rolled.iloc[-1].round(1).to_string())


def _profile(args: argparse.Namespace, config: PipelineConfig) -> None:
    from cloud_immersion.compute.summary import immersion_profile
    from cloud_immersion.pipeline import run_file

    result = run_file(args.input, config, skiprows=args.skiprows)
    print(immersion_profile(result.immersion).round(1).to_string())


if __name__ == "__main__":
    main()
