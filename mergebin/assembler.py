"""
Assemble the output image from parsed input and output specs.

Inputs are written strictly in command line order. Gaps up to an explicit
offset and the tail up to the requested size are filled with the pad byte.
The output is never truncated and never rewritten backwards.
"""

import io
import os
from collections import namedtuple

from mergebin.errors import (
    FileOpenError,
    FileTooLargeError,
    OffsetBehindCursorWarning,
    OffsetOrderError,
    OutputSizeExceededWarning,
)
from mergebin.ihex import is_hex_file, load_hex_image
from mergebin.options import FILE_SIZE_MAX

CHUNK_SIZE = 1024 * 1024

Placement = namedtuple('Placement', 'path offset size')


class MergeResult:
    def __init__(self):
        self.placements = []
        self.warnings = []
        self.size = 0


class ImageAssembler:
    def __init__(self, inputs, output):
        self.inputs = inputs
        self.output = output

    def run(self):
        result = MergeResult()
        try:
            f_out = open(self.output.path, 'wb')
        except OSError as e:
            raise FileOpenError(f'Can not open output file: {self.output.path} ({e.strerror or e})') from e

        with f_out:
            for spec in self.inputs:
                result.placements.append(self.merge_input(f_out, spec, result))
            result.size = self.pad_to_size(f_out, result)
        return result

    def open_input(self, spec):
        """Open an input as a binary file object, decoding Intel HEX when asked."""
        try:
            if self.output.ihex and is_hex_file(spec.path):
                with open(spec.path, 'r') as f_hex:
                    image = load_hex_image(f_hex, self.output.pad_byte, name=spec.path)
                return io.BytesIO(image)
            return open(spec.path, 'rb')
        except OSError as e:
            raise FileOpenError(f'Can not open input file: {spec.path} ({e.strerror or e})') from e

    def measure(self, f_in, spec):
        try:
            size = f_in.seek(0, os.SEEK_END)
            f_in.seek(0, os.SEEK_SET)
        except OSError as e:
            raise FileOpenError(f'Can not determine size of input file: {spec.path}') from e

        if size > FILE_SIZE_MAX:
            raise FileTooLargeError(f'File too big: {spec.path} ({size} bytes)')
        spec.size = size

    def merge_input(self, f_out, spec, result):
        with self.open_input(spec) as f_in:
            self.measure(f_in, spec)

            cursor = f_out.tell()
            offset = cursor if spec.follows_previous else spec.offset
            if offset > cursor:
                self.fill(f_out, offset - cursor)
            elif offset < cursor:
                message = (f'Offset 0x{offset:08X} of {spec.path} is behind '
                           f'already written data (0x{cursor:08X})')
                if self.output.strict:
                    raise OffsetOrderError(message)
                # compatible behaviour: no seek back, the input lands at the cursor
                result.warnings.append(OffsetBehindCursorWarning(
                    f'{message}, written at 0x{cursor:08X} instead'))
                offset = cursor

            while True:
                buf = f_in.read(CHUNK_SIZE)
                if not buf:
                    break
                f_out.write(buf)

        return Placement(spec.path, offset, spec.size)

    def fill(self, f_out, count):
        chunk = bytes([self.output.pad_byte]) * min(count, CHUNK_SIZE)
        while count >= len(chunk) > 0:
            f_out.write(chunk)
            count -= len(chunk)
        if count:
            f_out.write(chunk[:count])

    def pad_to_size(self, f_out, result):
        cursor = f_out.tell()
        if not self.output.size:
            return cursor

        if cursor <= self.output.size:
            self.fill(f_out, self.output.size - cursor)
            return self.output.size

        # never truncate
        result.warnings.append(OutputSizeExceededWarning(
            f'Output file size is larger than expected ! '
            f'({cursor} > {self.output.size} bytes)'))
        return cursor
