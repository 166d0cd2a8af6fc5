#!/usr/bin/env python3
"""Command line interface for lipidadduct"""

import argparse
import logging
import os
import sys
from typing import List, Optional

from lipidadduct import __version__
from lipidadduct.adducts import (
    IonizationMode,
    labels_for,
    lookup,
    mz_from_neutral_mass,
    neutral_mass_from_mz,
)
from lipidadduct.batch import detect_adducts_table, load_peak_table, save_peak_table
from lipidadduct.config import ConfigManager
from lipidadduct.exceptions import LipidAdductError

logger = logging.getLogger(__name__)


def configure_logging(verbose: bool = False):
    log_level = 'DEBUG' if verbose else os.getenv('LOG_LEVEL', 'INFO').upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format='%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )


def build_parser() -> argparse.ArgumentParser:
    config = ConfigManager.load_config()

    parser = argparse.ArgumentParser(
        prog='lipidadduct',
        description='Lipid adduct detection from co-eluting LC-MS signals',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  lipidadduct detect peaks.csv -o peaks_adducts.csv --mode positive --tolerance 0.01
  lipidadduct detect peaks.csv --mode negative --ppm 10
  lipidadduct mass 700.5 '[M+H]+'
  lipidadduct mz 699.4927 '[M+Na]+'
  lipidadduct adducts --mode negative
        """
    )
    parser.add_argument('--version', action='version', version=f'lipidadduct {__version__}')
    parser.add_argument('--verbose', '-v', action='store_true', help='Verbose output')

    subparsers = parser.add_subparsers(dest='command', required=True)

    detect = subparsers.add_parser('detect', help='Detect adducts for every peak in a CSV table')
    detect.add_argument('input', help='Peak table CSV (columns: mz, intensity, rt_min, lipid, group)')
    detect.add_argument('--output', '-o', help='Output CSV file')
    detect.add_argument('--mode', choices=['positive', 'negative'],
                        default=ConfigManager.get_ionization_mode().value,
                        help='Ionization mode')
    tolerance = detect.add_mutually_exclusive_group()
    tolerance.add_argument('--tolerance', type=float,
                           help=f"Absolute m/z tolerance in Da (default: {ConfigManager.get_tolerance()})")
    tolerance.add_argument('--ppm', type=float,
                           help='m/z tolerance in ppm of each target m/z')
    detect.add_argument('--group-column', default=config['group_column'],
                        help='Column holding the co-elution group')

    mass = subparsers.add_parser('mass', help='Neutral monoisotopic mass from an observed m/z')
    mass.add_argument('mz', type=float)
    mass.add_argument('adduct')

    mz = subparsers.add_parser('mz', help='m/z of a neutral monoisotopic mass as an adduct')
    mz.add_argument('mass', type=float)
    mz.add_argument('adduct')

    adducts = subparsers.add_parser('adducts', help='List the adduct library')
    adducts.add_argument('--mode', choices=['positive', 'negative'],
                         help='Only list one ionization mode')

    return parser


def run_detect(args):
    if not args.output:
        stem = os.path.splitext(os.path.basename(args.input))[0]
        args.output = f"{stem}_adducts.csv"

    if args.tolerance is None and args.ppm is None:
        args.tolerance = ConfigManager.get_tolerance()
        args.ppm = ConfigManager.load_config().get('ppm_tolerance')

    peaks = load_peak_table(args.input)
    print(f"Loaded {len(peaks)} peaks from {args.input}")

    if args.ppm is not None:
        print(f"Tolerance: {args.ppm} ppm ({args.mode} mode)")
    else:
        print(f"Tolerance: {args.tolerance} Da ({args.mode} mode)")

    result = detect_adducts_table(peaks, args.mode,
                                  mz_tolerance=args.tolerance,
                                  ppm_tolerance=args.ppm,
                                  group_column=args.group_column)
    output = save_peak_table(result, args.output)

    print(f"\nAdduct distribution:")
    print(result['adduct'].value_counts().to_string())
    print(f"\nSaved to: {output.resolve()}")


def run_adducts(args):
    modes = [IonizationMode.parse(args.mode)] if args.mode else list(IonizationMode)
    for mode in modes:
        print(f"{mode.value}:")
        for label in labels_for(mode):
            delta, _ = lookup(label)
            print(f"  {label:<16} {delta:+.6f}")


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    try:
        if args.command == 'detect':
            run_detect(args)
        elif args.command == 'mass':
            print(f"{neutral_mass_from_mz(args.mz, args.adduct):.6f}")
        elif args.command == 'mz':
            print(f"{mz_from_neutral_mass(args.mass, args.adduct):.6f}")
        elif args.command == 'adducts':
            run_adducts(args)
    except (LipidAdductError, ValueError, OSError) as e:
        logger.error(str(e))
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
