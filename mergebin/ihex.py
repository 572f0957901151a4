"""
Intel HEX inputs, decoded with the intelhex library.

The decoded image spans the lowest to the highest address of the file,
holes are filled with the pad byte. The file's own load addresses are not
used for placement: the image goes to the offset given on the command line.
"""

from intelhex import IntelHex, IntelHexError

from mergebin.errors import FileTooLargeError, InputFormatError
from mergebin.options import FILE_SIZE_MAX

HEX_SUFFIXES = ('.hex', '.ihex')


def is_hex_file(path):
    return path.lower().endswith(HEX_SUFFIXES)


def load_hex_image(fobj, pad_byte, name=None):
    ih = IntelHex()
    ih.padding = pad_byte
    try:
        ih.loadhex(fobj)
    except (IntelHexError, ValueError) as e:
        raise InputFormatError(f'Can not decode Intel HEX file: {name or fobj} ({e})') from e

    if not len(ih):
        return b''

    # checked on the address span, before the padded image is built
    size = ih.maxaddr() - ih.minaddr() + 1
    if size > FILE_SIZE_MAX:
        raise FileTooLargeError(f'File too big: {name or fobj} ({size} bytes decoded)')
    return ih.tobinstr()
