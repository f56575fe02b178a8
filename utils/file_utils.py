# utils/file_utils.py

"""File operation utilities."""
import codecs
from encodings.aliases import aliases
from pathlib import Path
from typing import List


def format_size(size_bytes: int) -> str:
    """Formats bytes into a human-readable string (KB, MB, GB)."""
    if size_bytes < 1024:
        return f"{size_bytes} B"
    size = float(size_bytes)
    for unit in ['B', 'KB', 'MB', 'GB', 'TB']:
        if size < 1024.0:
            return f"{size:.1f} {unit}"
        size /= 1024.0
    return f"{size:.1f} PB"


def get_display_path(file_path: Path) -> str:
    """Get a user-friendly display path, showing relative to home if possible."""
    try:
        home_path_str = str(Path.home())
        file_path_str = str(file_path)
        if file_path_str.startswith(home_path_str):
            return "~/" + str(Path(file_path).relative_to(Path.home()))
        return file_path_str
    except (ValueError, OSError):
        return str(file_path)


def available_encodings() -> List[str]:
    """Names of the text codecs that can encode a search pattern, sorted."""
    names = set()
    for codec_name in set(aliases.values()):
        try:
            info = codecs.lookup(codec_name)
        except LookupError:
            continue
        # Skip bytes-to-bytes codecs such as base64 or zlib
        if getattr(info, '_is_text_encoding', True):
            names.add(info.name.upper())
    names.add('UTF-8')
    return sorted(names)
