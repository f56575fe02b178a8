# core/byte_scanner.py

"""Streaming byte-pattern containment check for a single file."""
from pathlib import Path
from typing import Union

from core.data_structures import DEFAULT_WINDOW_SIZE
from core.exceptions import EmptyPatternError


def contains_pattern(pattern: bytes, file_path: Union[str, Path],
                     window_size: int = DEFAULT_WINDOW_SIZE) -> bool:
    """Check whether a file contains the exact byte sequence ``pattern``.

    The file is read in windows of ``window_size`` bytes, each over-read by
    ``len(pattern) - 1`` bytes so a match straddling two windows is still seen.
    Only the first ``window_size`` start offsets of a window are tested; the
    next window begins right after them.

    Args:
        pattern: Non-empty byte sequence to look for.
        file_path: File to scan.
        window_size: Number of start offsets tested per window.

    Returns:
        True as soon as a full match is found, False otherwise.

    Raises:
        EmptyPatternError: If ``pattern`` is empty.
        ValueError: If ``window_size`` is not positive.
        OSError: If the file cannot be opened or read.
    """
    if not pattern:
        raise EmptyPatternError("Search pattern must not be empty")
    if window_size <= 0:
        raise ValueError(f"Window size must be positive: {window_size}")

    pattern = bytes(pattern)
    overlap = len(pattern) - 1

    with open(file_path, 'rb') as f:
        pos = 0
        while True:
            f.seek(pos)
            window = f.read(window_size + overlap)
            if len(window) < len(pattern):
                return False

            # Offsets past the last full-length slot are covered by the next window
            limit = min(window_size, len(window) - overlap)
            if window.find(pattern, 0, limit + overlap) >= 0:
                return True

            if len(window) < window_size + overlap:
                return False
            pos += window_size
