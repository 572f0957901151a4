"""
Exceptions raised while parsing the command line and assembling an image.

Everything derives from MergeBinError so the CLI can report any of them
with a single ``Error: ...`` line.
"""


class MergeBinError(Exception):
    pass


class OptionValidationError(MergeBinError):
    """Malformed or out-of-range option value, or an unknown option."""
    pass


class OffsetParseError(MergeBinError):
    """The part before '@' is neither an integer nor '+'."""
    pass


class TooManyInputsError(MergeBinError):
    pass


class FileOpenError(MergeBinError):
    """An input or the output file could not be opened or sized."""
    pass


class FileTooLargeError(MergeBinError):
    pass


class InputFormatError(MergeBinError):
    """An Intel HEX input could not be decoded."""
    pass


class OffsetOrderError(MergeBinError):
    """An explicit offset lies behind data already written (strict mode)."""
    pass


class OutputSizeExceededWarning(UserWarning):
    """The requested output size is smaller than the merged content."""
    pass


class OffsetBehindCursorWarning(UserWarning):
    """An explicit offset lies behind data already written."""
    pass


class UsageRequested(Exception):
    """Not an error: the caller asked for the usage text."""

    def __init__(self, text):
        super().__init__(text)
        self.text = text
