#!/usr/bin/env python3
"""
Fractus CLI — Shamir's Secret Sharing over GF(256).

Usage:
    fractus split -n 5 -k 3 -i secret.txt -o ./shares/
    fractus split -n 5 -k 3 --stdout -f hex < secret.txt
    fractus recover ./shares/share-001.json ./shares/share-002.json ./shares/share-003.json
    fractus recover ./shares/ -o secret.txt
    fractus info ./shares/ --detailed
"""

import argparse
import getpass
import json
import logging
import os
import sys

from . import sharing
from .config import load_config
from .formats import FORMATS, encode_share, parse_share

log = logging.getLogger('fractus')


def init_logging(verbose: bool, quiet: bool):
    if quiet:
        level = logging.ERROR
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter('%(message)s'))
    root = logging.getLogger('fractus')
    root.handlers[:] = [handler]
    root.setLevel(level)
    root.propagate = False


def read_secret(args) -> bytes:
    """Read the secret from exactly one of: env var, prompt, file, stdin."""
    methods = [args.env_var is not None, args.interactive, args.input != '-']
    if sum(methods) > 1:
        raise ValueError("Only one input method can be specified")

    if args.env_var is not None:
        if args.env_var not in os.environ:
            raise ValueError(f"Environment variable '{args.env_var}' not found")
        secret = os.environ[args.env_var].encode('utf-8')
    elif args.interactive:
        secret = getpass.getpass('Enter secret: ').encode('utf-8')
    elif args.input == '-':
        secret = sys.stdin.buffer.read()
    else:
        with open(args.input, 'rb') as f:
            secret = f.read()

    if not secret:
        raise ValueError("Secret cannot be empty")
    return secret


def cmd_split(args, config):
    """Split a secret into shares."""
    n = args.shares if args.shares is not None else config.defaults.shares
    k = args.threshold if args.threshold is not None else config.defaults.threshold
    fmt = args.format or config.defaults.format

    sharing.validate_params(n, k)
    secret = read_secret(args)

    log.debug("Splitting %d bytes, %d-of-%d threshold", len(secret), k, n)

    shares = sharing.split(secret, n=n, k=k, seed=args.seed,
                           include_metadata=args.include_metadata)

    if args.stdout:
        for data in shares:
            encoded = encode_share(data, fmt)
            if isinstance(encoded, bytes):
                sys.stdout.buffer.write(encoded)
            else:
                print(encoded)
        sys.stdout.flush()
        return 0

    output_dir = args.output_dir or '.'
    paths = sharing.save_shares(shares, output_dir, fmt=fmt, base_name=args.base_name)

    log.info(f"Successfully generated {len(paths)} shares with threshold {k}")
    log.info(f"Shares saved to: {output_dir}")
    return 0


def _read_stdin_shares(fmt):
    shares = []
    for line in sys.stdin:
        line = line.strip()
        if line:
            shares.append(parse_share(line, fmt))
    return shares


def cmd_recover(args, config):
    """Recover a secret from shares."""
    if args.stdin:
        shares = _read_stdin_shares(args.format)
    else:
        if not args.inputs:
            raise ValueError("No share files given (or use --stdin)")
        shares, _ = sharing.load_shares(args.inputs, args.format)

    if not shares:
        raise ValueError("No shares provided")

    log.debug(f"Recovering with {len(shares)} shares")

    secret = sharing.recover(shares, threshold=args.threshold, verify=args.verify)

    if args.output == '-':
        sys.stdout.buffer.write(secret)
        sys.stdout.flush()
    else:
        with open(args.output, 'wb') as f:
            f.write(secret)
        log.info(f"Secret successfully recovered from {len(shares)} shares")
        log.info(f"Saved to: {args.output}")
    return 0


def print_info_table(info: dict, detailed: bool):
    print("Share Set Information")
    print("=" * 40)
    print(f"Total shares:         {info['total_shares']}")
    print(f"Unique x-coordinates: {info['unique_x_coordinates']}")
    if info['y_length'] is not None:
        print(f"Y-vector length:      {info['y_length']} bytes")
    else:
        print("Y-vector length:      inconsistent")
    if info['secret_size'] is not None:
        print(f"Secret size:          {info['secret_size']} bytes")
    if info['inferred_threshold'] is not None:
        print(f"Inferred threshold:   {info['inferred_threshold']}")

    if info['consistency_issues']:
        print("\nConsistency Issues:")
        for issue in info['consistency_issues']:
            print(f"  - {issue}")

    if detailed and info['shares']:
        print("\nIndividual Shares:")
        print(f"  {'ID':<4} {'X':<5} {'Y-Len':<7} {'K':<5} {'N':<5} Source")
        for s in info['shares']:
            print(
                f"  {_or_q(s['id']):<4} {s['x_coordinate']:<5} {s['y_length']:<7} "
                f"{_or_q(s['threshold']):<5} {_or_q(s['total_shares']):<5} {s['source'] or ''}"
            )

    print("\nRecovery Status:")
    threshold = info['inferred_threshold']
    if threshold is None:
        print("  Cannot determine recovery status (no shares)")
    elif info['sufficient']:
        print(f"  Sufficient shares for recovery ({info['unique_x_coordinates']} >= {threshold})")
    else:
        print(f"  Insufficient shares for recovery ({info['unique_x_coordinates']} < {threshold})")


def _or_q(value):
    return '?' if value is None else str(value)


def cmd_info(args, config):
    """Display information about a set of shares."""
    shares, sources = sharing.load_shares(args.inputs, args.format)
    info = sharing.inspect_shares(shares, sources)

    if args.output_format == 'json':
        print(json.dumps(info, indent=2))
    else:
        print_info_table(info, args.detailed)

    return 0 if not info['consistency_issues'] else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='fractus',
        description="Fractus — Shamir's Secret Sharing over GF(256).",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Split a file into 5 shares, any 3 recover it
  %(prog)s split -n 5 -k 3 -i secret.txt -o ./shares/

  # Reproducible shares from a 32-byte hex seed
  %(prog)s split -n 3 -k 2 -i key.bin --seed 9090...90 --stdout -f hex

  # Recover from a directory of shares
  %(prog)s recover ./shares/ -o secret.txt

  # Inspect shares
  %(prog)s info ./shares/ --detailed
        """
    )
    parser.add_argument('--config', '-c', help='Configuration file path')
    parser.add_argument('--verbose', '-v', action='store_true', help='Verbose output')
    parser.add_argument('--quiet', '-q', action='store_true', help='Suppress non-error output')

    sub = parser.add_subparsers(dest='command', help='Command')

    # Split
    p_split = sub.add_parser('split', help='Split a secret into shares')
    p_split.add_argument('--shares', '-n', type=int, help='Total shares (N)')
    p_split.add_argument('--threshold', '-k', type=int, help='Threshold to recover (K)')
    p_split.add_argument('--input', '-i', default='-', help="Input file ('-' for stdin)")
    p_split.add_argument('--output-dir', '-o', help='Output directory for share files')
    p_split.add_argument('--format', '-f', choices=FORMATS, help='Share format')
    p_split.add_argument('--base-name', default='share', help='Base name for share files')
    p_split.add_argument('--stdout', action='store_true', help='Print shares instead of writing files')
    p_split.add_argument('--env-var', help='Read secret from environment variable')
    p_split.add_argument('--interactive', action='store_true', help='Prompt for secret (hidden input)')
    p_split.add_argument('--seed', help='Hex seed (32 bytes) for deterministic shares')
    p_split.add_argument('--include-metadata', action='store_true', help='Include metadata (JSON)')

    # Recover
    p_recover = sub.add_parser('recover', help='Recover a secret from shares')
    p_recover.add_argument('inputs', nargs='*', help='Share files or directories')
    p_recover.add_argument('--format', '-f', choices=FORMATS, help='Share format (auto-detect)')
    p_recover.add_argument('--output', '-o', default='-', help="Output file ('-' for stdout)")
    p_recover.add_argument('--threshold', '-t', type=int, help='Threshold (K)')
    p_recover.add_argument('--stdin', action='store_true', help='Read shares from stdin, one per line')
    p_recover.add_argument('--verify', action='store_true', help='Re-split and recover as a self-check')

    # Info
    p_info = sub.add_parser('info', help='Display information about shares')
    p_info.add_argument('inputs', nargs='+', help='Share files or directories')
    p_info.add_argument('--format', '-f', choices=FORMATS, help='Share format (auto-detect)')
    p_info.add_argument('--detailed', '-d', action='store_true', help='Show per-share details')
    p_info.add_argument('--output-format', choices=('table', 'json'), default='table',
                        help='Report format')

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    init_logging(args.verbose, args.quiet)

    if args.command == 'recover' and args.stdin and args.format == 'binary':
        print("Error: binary shares cannot be read line by line from stdin", file=sys.stderr)
        return 1

    handlers = {
        'split': cmd_split,
        'recover': cmd_recover,
        'info': cmd_info,
    }

    try:
        config = load_config(args.config)
        return handlers[args.command](args, config)
    except (ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
