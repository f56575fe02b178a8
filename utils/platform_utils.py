# utils/platform_utils.py

"""Platform-specific utilities."""
import os
import platform
import subprocess
from pathlib import Path
from typing import Tuple


class FileOperationError(Exception):
    """Custom exception for file operation errors."""
    pass


def get_screen_geometry(root) -> Tuple[int, int]:
    """Gets primary screen dimensions from an existing Tk root."""
    return root.winfo_screenwidth(), root.winfo_screenheight()


def calculate_window_geometry(screen_width: int, screen_height: int) -> str:
    """Calculates a centered geometry string for the search window."""
    width = max(450, min(900, int(screen_width * 0.4)))
    height = max(450, min(800, int(screen_height * 0.5)))
    x = (screen_width - width) // 2
    y = (screen_height - height) // 2
    return f"{width}x{height}+{x}+{y}"


def open_file_or_folder(path: Path, open_folder: bool = False):
    """Opens a file or its containing folder using the OS default.

    Args:
        path: Path to open
        open_folder: If True, open containing folder instead of file

    Raises:
        FileOperationError: If the operation fails
        FileNotFoundError: If the path doesn't exist
    """
    concrete_path = Path(path)
    target = concrete_path.parent if open_folder else concrete_path

    if not target.exists():
        raise FileNotFoundError(f"Path does not exist: {target}")

    try:
        system = platform.system().lower()
        if system == 'windows':
            os.startfile(target)
        elif system == 'darwin':
            subprocess.run(['open', str(target)], check=True)
        else:  # Linux
            subprocess.run(['xdg-open', str(target)], check=True)
    except (OSError, subprocess.CalledProcessError) as e:
        raise FileOperationError(f"Could not open path {target}: {e}")
