import argparse
import logging
import sys

from bitwise import __version__
from bitwise.bits import (
    DEFAULT_SEPARATOR, DEFAULT_GROUP_SEPARATOR, DEFAULT_GROUP_SIZE,
    is_set, set_bit, clear_bit, render,
)


DESCRIPTION = """
bitwise -- Render and edit the bits of a byte sequence given in hexadecimal.

The hexadecimal arguments are concatenated (in order) into one byte
sequence. The last byte holds bits 0..7, the one before it bits 8..15,
and so on. Bits named with '--set' and '--clear' are changed (in the
order given) before the sequence is rendered.

    $ python -m bitwise 0a ff --sep ' '
    00001010 11111111
"""


# Parse hexadecimal strings (with an optional "0x" prefix, whitespace ignored)
# into one bytearray.
def parse_hex(values):
    sequence = bytearray()
    for text in values:
        digits = "".join(text.split())
        digits = digits[2:] if digits.lower().startswith("0x") else digits
        if (len(digits) % 2 == 1):
            logging.warning(f"Odd number of hex digits in {repr(text)}, padding with a leading zero.")
            digits = "0" + digits
        try:
            sequence += bytes.fromhex(digits)
        except ValueError:
            raise ValueError(f"invalid hexadecimal value {repr(text)}") from None
    return sequence


# Build a parser for "--set" / "--clear" values that remembers which edit was asked for.
def _edit(action):
    def parse(text):
        return (action, int(text, 0))
    parse.__name__ = action
    return parse


# Construct the command line parser.
def build_parser():
    parser = argparse.ArgumentParser(
        prog="bitwise", description=DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("hex", nargs="+", help="Bytes in hexadecimal, e.g. '0aff' or '0x0a ff'.")
    parser.add_argument("--sep", default=DEFAULT_SEPARATOR, help="Separator between bytes.")
    parser.add_argument("--group-sep", default=DEFAULT_GROUP_SEPARATOR, help="Separator between groups of bytes.")
    parser.add_argument("--group-size", type=int, default=DEFAULT_GROUP_SIZE, help="Bytes per group, 0 disables grouping.")
    parser.add_argument("--set", dest="edits", action="append", type=_edit("set"), metavar="I", help="Set global bit I.")
    parser.add_argument("--clear", dest="edits", action="append", type=_edit("clear"), metavar="I", help="Clear global bit I.")
    parser.add_argument("--test", type=lambda text: int(text, 0), metavar="I", help="Print 1 or 0 for global bit I instead of rendering.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debugging information.")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


# Run the command line interface, return the process exit status.
def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=(logging.DEBUG if args.verbose else logging.WARNING),
        format="%(levelname)s: %(message)s",
    )
    try:
        sequence = parse_hex(args.hex)
        logging.debug(f"Parsed {len(sequence)} bytes: {sequence.hex()}")
        for action, i in (args.edits or []):
            if (action == "set"):
                set_bit(i, sequence)
            elif clear_bit(i, sequence):
                logging.debug(f"Cleared bit {i}.")
            else:
                logging.debug(f"Bit {i} was already clear.")
        if (args.test is not None):
            print("1" if is_set(args.test, sequence) else "0")
        else:
            print(render(sequence, args.sep, args.group_sep, args.group_size))
    except (IndexError, ValueError, TypeError) as err:
        print(f"error: {err}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
