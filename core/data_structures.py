"""Core data structures for the Find Text tool."""
import sys
from typing import NamedTuple, Optional, Tuple

# Progress counter values with a special meaning
PROGRESS_DONE = sys.maxsize
PROGRESS_INDETERMINATE = -1

DEFAULT_ENCODING = 'UTF-8'
DEFAULT_WINDOW_SIZE = 4 * 1024
DEFAULT_RETIRE_TIMEOUT = 1.0
MIN_TEXT_LENGTH = 3


class SearchRequest(NamedTuple):
    """Holds everything needed to start one text search."""
    scope: Tuple
    pattern_text: str
    encoding: str = DEFAULT_ENCODING


class ScanSettings(NamedTuple):
    """Tuning knobs for the background scan."""
    window_size: int = DEFAULT_WINDOW_SIZE
    retire_timeout: float = DEFAULT_RETIRE_TIMEOUT


class MatchEntry(NamedTuple):
    """A matched node flattened for display or export."""
    path: str
    size: int
    name: Optional[str] = None
