#!/usr/bin/env python3
"""
cryptorand CLI - Command-line access to the secure random primitives.
"""

import argparse
import logging
import sys

from cryptorand import __version__
from cryptorand.config import Config
from cryptorand.core.entropy import SOURCES, HardwareRNG, get_source
from cryptorand.core.errors import RandomnessError
from cryptorand.core.generator import CHARSETS, string_entropy_bits, string_with_charset
from cryptorand.core.log import setup_logging
from cryptorand.core.sampler import INT64_MAX, INT64_MIN, number, number_in_range
from cryptorand.core.sequence import pick, shuffle
from cryptorand.core.uniformity import run_all_checks


def build_parser(config: Config) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cryptorand",
        description="cryptorand - Cryptographically secure random values",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s number                      # Signed 64-bit integer
  %(prog)s number --min 1 --max 6 -n 5 # Five dice rolls
  %(prog)s string -l 24 -c safe        # 24-character token
  %(prog)s string --chars 01 -l 64     # Custom charset
  %(prog)s pick red green blue         # One of the arguments
  %(prog)s shuffle a b c d             # Arguments in random order
  %(prog)s --source rdrand check       # Uniformity checks on RDRAND
        """
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--source", choices=SOURCES, default=config.get("entropy", "source"),
                        help="Entropy source (default: %(default)s)")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Log provider selection and check details")

    sub = parser.add_subparsers(dest="command", required=True)

    num = sub.add_parser("number", help="Random integers")
    num.add_argument("--min", type=int, dest="min_value",
                     help="Inclusive lower bound (default: int64 minimum)")
    num.add_argument("--max", type=int, dest="max_value",
                     help="Inclusive upper bound (default: int64 maximum)")
    num.add_argument("-n", "--count", type=int, default=1,
                     help="How many numbers (default: 1)")

    text = sub.add_parser("string", help="Random strings")
    text.add_argument("-l", "--length", type=int, default=config.get("string", "length"),
                      help="String length (default: %(default)s)")
    text.add_argument("-c", "--charset", choices=CHARSETS.keys(),
                      default=config.get("string", "charset"),
                      help="Named character set (default: %(default)s)")
    text.add_argument("--chars", metavar="STR",
                      help="Literal character set, overrides --charset")
    text.add_argument("-n", "--count", type=int, default=config.get("string", "count"),
                      help="How many strings (default: %(default)s)")
    text.add_argument("--show-entropy", action="store_true",
                      help="Print the entropy of each string in bits")

    pk = sub.add_parser("pick", help="Pick one of the given items")
    pk.add_argument("items", nargs="*")

    sh = sub.add_parser("shuffle", help="Print the given items in random order")
    sh.add_argument("items", nargs="*")

    chk = sub.add_parser("check", help="Run uniformity checks on the primitives")
    chk.add_argument("--samples", type=int, default=config.get("check", "samples"),
                     help="Draws per check (default: %(default)s)")

    return parser


def main(argv=None, config=None):
    config = config or Config()
    args = build_parser(config).parse_args(argv)

    if args.verbose:
        setup_logging(logging.DEBUG)

    handlers = {
        "number": _handle_number,
        "string": _handle_string,
        "pick": _handle_pick,
        "shuffle": _handle_shuffle,
        "check": _handle_check,
    }

    try:
        source = get_source(args.source)
        return handlers[args.command](args, source)
    except (RandomnessError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    finally:
        HardwareRNG.cleanup()


def _handle_number(args, source):
    """Handle the number command."""
    if args.count < 0:
        raise ValueError(f"Invalid count: {args.count}")

    bounded = args.min_value is not None or args.max_value is not None
    low = INT64_MIN if args.min_value is None else args.min_value
    high = INT64_MAX if args.max_value is None else args.max_value

    for _ in range(args.count):
        if bounded:
            print(number_in_range(low, high, source=source))
        else:
            print(number(source=source))
    return 0


def _handle_string(args, source):
    """Handle the string command."""
    if args.count < 0:
        raise ValueError(f"Invalid count: {args.count}")

    if args.chars is not None:
        charset = args.chars
    elif args.charset in CHARSETS:
        charset = CHARSETS[args.charset]
    else:
        # Only reachable through a bad config file value
        raise ValueError(f"Unknown charset: {args.charset}")

    for _ in range(args.count):
        value = string_with_charset(args.length, charset, source=source)
        if args.show_entropy:
            bits = string_entropy_bits(args.length, charset)
            print(f"{value}  ({bits:.1f} bits)")
        else:
            print(value)
    return 0


def _handle_pick(args, source):
    """Handle the pick command."""
    print(pick(args.items, source=source))
    return 0


def _handle_shuffle(args, source):
    """Handle the shuffle command."""
    items = list(args.items)
    shuffle(items, source=source)
    print(" ".join(items))
    return 0


def _handle_check(args, source):
    """Handle the check command."""
    results = run_all_checks(args.samples, source=source, verbose=args.verbose)

    for test in results['tests']:
        status = "PASS" if test['passed'] else "FAIL"
        print(f"{status}  {test['name']:<20} p-value: {test['p_value']:.6f}")

    print(f"\nResult: {results['passed']}/{results['total']} tests passed "
          f"({results['pass_rate'] * 100:.1f}%)")

    if results['pass_rate'] < 0.95:
        print("WARNING: Output distribution looks non-uniform.", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main() or 0)
