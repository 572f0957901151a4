#!/usr/bin/env python3
"""
Merge binary files into one image at fixed offsets.
Usage: python -m mergebin [--size=<size>] [--pad=<padbyte>] 0x0@boot.bin 0x2000@app.bin firmware.bin
"""

import sys

from mergebin.assembler import ImageAssembler
from mergebin.errors import MergeBinError, UsageRequested
from mergebin.options import parse_args

EXIT_FAILURE = 255


def main(argv=None):
    if argv is None:
        argv = sys.argv[1:]

    try:
        inputs, output = parse_args(argv)
        result = ImageAssembler(inputs, output).run()
    except UsageRequested as usage:
        print(usage.text)
        return
    except MergeBinError as e:
        print(f"Error: {e}")
        sys.exit(EXIT_FAILURE)

    for warning in result.warnings:
        print(f"WARNING: {warning}")

    if output.verbose:
        for placement in result.placements:
            end = placement.offset + placement.size
            print(f"  0x{placement.offset:08X} - 0x{end:08X}  {placement.path}")

    print(f"Successfully merged {len(inputs)} files into {output.path} ({result.size} bytes)")


if __name__ == "__main__":
    main()
