"""
rangetree

Augmented binary search tree answering range coverage queries:
- Range value type and validation (range.py)
- RangeTree with insert, delete and coverage query (range_tree.py)
- Configuration parsing (config.py)
- Datetime range helpers (timezone_utils.py)
"""

from .range import Range, InvalidRangeError, validate_range
from .range_tree import RangeTree, RangeNode
from .config import Config, TreeConfig
from . import timezone_utils
from .timezone_utils import set_timezone, utc_range, local_range

__all__ = [
    'Range',
    'InvalidRangeError',
    'validate_range',
    'RangeTree',
    'RangeNode',
    'Config',
    'TreeConfig',
    'timezone_utils',
    'set_timezone',
    'utc_range',
    'local_range',
]
