"""
Command line parsing for mergebin.

Turns the argument vector into a list of InputSpec and one OutputSpec,
or raises one of the errors from mergebin.errors.
"""

import argparse

from mergebin import __version__
from mergebin.errors import (
    OffsetParseError,
    OptionValidationError,
    TooManyInputsError,
    UsageRequested,
)

FILE_MERGE_COUNTS_MAX = 8
FILE_PATH_LENGTH_MAX = 256
FILE_SIZE_MAX = 256 * 1024 * 1024

DEFAULT_OUTPUT = 'output.bin'
DEFAULT_PAD_BYTE = 0xFF

# Marks an input that starts wherever the previous one ended.
FOLLOW_PREVIOUS = '+'

EPILOG = """\
notice:
    Offset should be specified address or '+' (follow previous file);
    Offset start at 0x00000000 by default;
    Offset 'MUST' go from low to high;

example:
    mergebin 0x00000000@boot.bin 0x00002000@app.bin [firmware.bin]
    mergebin +@boot.bin +@app.bin [firmware.bin]
    mergebin --size=0x40000 --pad=0x00 0@boot.bin 0x8000@app.bin firmware.bin
"""


class InputSpec:
    def __init__(self, path, offset=None):
        self.path = path
        # None means continue at the output cursor
        self.offset = offset
        # filled in when the file is opened
        self.size = 0

    @property
    def follows_previous(self):
        return self.offset is None

    def __repr__(self):
        offset = FOLLOW_PREVIOUS if self.follows_previous else '0x%08X' % self.offset
        return f'InputSpec({offset}@{self.path!r})'


class OutputSpec:
    def __init__(self, path=DEFAULT_OUTPUT, size=0, pad_byte=DEFAULT_PAD_BYTE,
                 ihex=False, strict=False, verbose=False):
        self.path = path
        # 0 means no enforced size
        self.size = size
        self.pad_byte = pad_byte
        self.ihex = ihex
        self.strict = strict
        self.verbose = verbose

    def __repr__(self):
        return (f'OutputSpec({self.path!r}, size={self.size}, '
                f'pad_byte=0x{self.pad_byte:02X})')


class ArgumentParser(argparse.ArgumentParser):
    """argparse parser that raises instead of printing to stderr and exiting"""

    def error(self, message):
        raise OptionValidationError(message)


class UsageAction(argparse.Action):
    def __init__(self, option_strings, dest=argparse.SUPPRESS,
                 default=argparse.SUPPRESS, help=None):
        super().__init__(option_strings=option_strings, dest=dest,
                         default=default, nargs=0, help=help)

    def __call__(self, parser, namespace, values, option_string=None):
        raise UsageRequested(parser.format_help())


def auto_int(text):
    """
    Parse an integer with base detection: 0x.. hex, 0o.. octal, 0b.. binary,
    decimal otherwise. Leading zeros are read as decimal.
    """
    try:
        return int(text, 0)
    except ValueError:
        if text.isdigit():
            return int(text, 10)
        raise


def parse_size(text):
    try:
        value = auto_int(text)
    except ValueError:
        value = None
    if value is None or not 1 <= value <= FILE_SIZE_MAX * FILE_MERGE_COUNTS_MAX:
        raise OptionValidationError(f'Illegal or unrecognized size option: {text!r}')
    return value


def parse_pad_byte(text):
    try:
        value = auto_int(text)
    except ValueError:
        value = None
    if value is None or not 0x00 <= value <= 0xFF:
        raise OptionValidationError(f'Illegal or unrecognized padbyte option: {text!r}')
    return value


def parse_offset(text):
    """Return the offset in bytes, or None for '+'."""
    if text == FOLLOW_PREVIOUS:
        return None
    try:
        value = auto_int(text)
    except ValueError:
        value = -1
    if value < 0:
        raise OffsetParseError(f'Illegal or unrecognized offset: {text!r}')
    return value


def build_parser():
    parser = ArgumentParser(
        prog='mergebin',
        description='Merge binary files into one image at fixed offsets',
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        add_help=False,
    )
    parser.add_argument(
        '-s', '--size', metavar='<size>',
        help='output file size, default is not specified')
    parser.add_argument(
        '-p', '--pad', metavar='<padbyte>',
        help='pad free space with specified byte (default: 0xFF)')
    parser.add_argument(
        '-x', '--ihex', action='store_true',
        help='decode *.hex / *.ihex inputs as Intel HEX')
    parser.add_argument(
        '--strict', action='store_true',
        help='fail when an offset lies behind data already written')
    parser.add_argument(
        '-v', '--verbose', action='store_true',
        help='print where each input was placed')
    parser.add_argument(
        '-h', '--help', action=UsageAction,
        help='print usage messages')
    parser.add_argument(
        '--version', action='version', version=f'%(prog)s {__version__}')
    parser.add_argument(
        'files', nargs='*', metavar='<offset>@<input> ... [<output>]',
        help=f'up to {FILE_MERGE_COUNTS_MAX} inputs, then an optional output '
             f'file (default: {DEFAULT_OUTPUT})')
    return parser


def parse_args(argv, path_length_max=FILE_PATH_LENGTH_MAX):
    """
    Parse a command line (without the program name).

    Returns ``(inputs, output)``. Raises UsageRequested for an empty
    command line or -h/--help.
    """
    parser = build_parser()
    if not argv:
        raise UsageRequested(parser.format_help())

    try:
        args = parser.parse_intermixed_args(argv)
    except OptionValidationError:
        # argparse takes '-16@app.bin' for an unknown option
        for token in argv:
            if token[:1] == '-' and token[1:2].isdigit() and '@' in token:
                parse_offset(token.split('@', 1)[0])
        raise

    output = OutputSpec(ihex=args.ihex, strict=args.strict, verbose=args.verbose)
    if args.size is not None:
        output.size = parse_size(args.size)
    if args.pad is not None:
        output.pad_byte = parse_pad_byte(args.pad)

    # paths are cut like a fixed char buffer with a terminating NUL
    keep = path_length_max - 1

    inputs = []
    for token in args.files:
        if '@' not in token:
            # first non-input token is the output, anything after it is ignored
            output.path = token[:keep] or DEFAULT_OUTPUT
            break
        if len(inputs) >= FILE_MERGE_COUNTS_MAX:
            raise TooManyInputsError(
                f'Too many input files, at most {FILE_MERGE_COUNTS_MAX} are supported: {token!r}')
        offset, path = token.split('@', 1)
        inputs.append(InputSpec(path[:keep], parse_offset(offset)))

    return inputs, output
