"""
mergebin: merge binary files into one flash image at fixed offsets.
"""

__version__ = '1.0.0'

from mergebin.assembler import ImageAssembler, MergeResult, Placement  # noqa: E402
from mergebin.options import InputSpec, OutputSpec, parse_args  # noqa: E402
