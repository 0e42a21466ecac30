#!/usr/bin/env python3
"""
Command-line interface for the base fee simulator.

Examples:
    basefee-sim 3x50 2x5 --min-fee 100 --max-fee 10000 --gas-limit 1000
    basefee-sim --preset aggressive-quadratic 20x90 20x0 --metrics
    basefee-sim --config scenario.json --metrics --no-table
"""

import argparse
import logging
import sys
from typing import List, Optional

import pandas as pd
from pydantic import ValidationError

from .config import PRESETS, SimulationRequest, load_config, read_config_file
from .core.parameters import Strategy
from .core.simulation_engine import SimulationEngine
from .core.validation import SimulationInputError
from .metrics.calculator import MetricsCalculator

logger = logging.getLogger(__name__)


PARAMETER_FLAGS = {
    'gas_limit': 'gas_limit',
    'inc_threshold': 'increasing_threshold_pct',
    'dec_threshold': 'decreasing_threshold_pct',
    'rate': 'base_fee_change_rate_pct',
    'min_fee': 'min_base_fee_wei',
    'max_fee': 'max_base_fee_wei',
    'strategy': 'strategy',
    'k': 'k',
}


def setup_logging(verbose: bool = False):
    """Setup logging configuration."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler()]
    )


def build_request(args: argparse.Namespace) -> SimulationRequest:
    """
    Merge config file, preset, flag overrides and positional segments.

    Precedence, lowest first: preset, config file parameters, flags. A
    --preset flag replaces any "preset" named in the config file.
    """
    base = read_config_file(args.config) if args.config else {}
    preset = args.preset or base.get('preset')

    parameters = dict(base.get('parameters') or {})
    for flag, field in PARAMETER_FLAGS.items():
        value = getattr(args, flag)
        if value is not None:
            parameters[field] = value

    data = {'parameters': parameters, 'segments': args.segments or base.get('segments', [])}
    return load_config(data, preset=preset)


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Simulate a congestion-responsive base fee over block utilization segments',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )
    parser.add_argument('segments', nargs='*', help='Segments as <blocks>x<pct>, e.g. 3x50 2x5')
    parser.add_argument('--config', help='JSON file with "parameters" and "segments"')
    parser.add_argument('--preset', choices=sorted(PRESETS), help='Named parameter preset')

    params = parser.add_argument_group('parameters')
    params.add_argument('--gas-limit', type=int, help='Gas capacity per block')
    params.add_argument('--inc-threshold', type=float, help='Increasing threshold (%%)')
    params.add_argument('--dec-threshold', type=float, help='Decreasing threshold (%%)')
    params.add_argument('--rate', type=float, help='Base fee change rate (%%)')
    params.add_argument('--min-fee', type=int, help='Minimum (and starting) base fee in wei')
    params.add_argument('--max-fee', type=int, help='Maximum base fee in wei')
    params.add_argument('--strategy', choices=[s.value for s in Strategy], help='Adjustment strategy')
    params.add_argument('-k', type=float, help='Curvature weight for weighted-quadratic')

    output = parser.add_argument_group('output')
    output.add_argument('--metrics', action='store_true', help='Print summary metrics')
    output.add_argument('--no-table', action='store_true', help='Do not print the per-block table')
    output.add_argument('--verbose', '-v', action='store_true', help='Verbose logging')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    try:
        request = build_request(args)
        engine = SimulationEngine(request.to_parameters())
        df = engine.simulate_series(request.to_segments())
    except (ValidationError, SimulationInputError, ValueError, KeyError, FileNotFoundError) as e:
        logging.error(f"Error: {e}")
        return 1

    if df.empty:
        print("No blocks to simulate")
        return 0

    if not args.no_table:
        with pd.option_context('display.max_rows', None, 'display.width', 120):
            print(df.to_string(index=False))

    if args.metrics:
        calculator = MetricsCalculator()
        print()
        print(calculator.summarize(df))
        for name, value in calculator.calculate(df).items():
            print(f"  {name}: {value}")

    return 0


if __name__ == '__main__':
    sys.exit(main())
