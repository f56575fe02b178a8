# core/config.py

"""Configuration management."""
import json
import logging
from pathlib import Path
from typing import Optional

from core.data_structures import (
    DEFAULT_ENCODING, DEFAULT_RETIRE_TIMEOUT, DEFAULT_WINDOW_SIZE, MIN_TEXT_LENGTH,
    ScanSettings
)

logger = logging.getLogger(__name__)


class Config:
    """Application configuration manager."""

    def __init__(self, config_file: Optional[Path] = None):
        self.config_file = config_file or Path.home() / '.find_text_config.json'
        self.default_config = {
            'language': 'en',
            'encoding': DEFAULT_ENCODING,
            'min_text_length': MIN_TEXT_LENGTH,
            'window_size': DEFAULT_WINDOW_SIZE,
            'retire_timeout': DEFAULT_RETIRE_TIMEOUT,
            'window_geometry': None,
            'log_file': None
        }
        self.config = self.load_config()

    def load_config(self) -> dict:
        """Load configuration from file."""
        if self.config_file.exists():
            try:
                with open(self.config_file, 'r', encoding='utf-8') as f:
                    loaded = json.load(f)
                # Merge with defaults
                config = self.default_config.copy()
                config.update(loaded)
                return config
            except (OSError, ValueError) as e:
                logger.warning("Ignoring unreadable config %s: %s", self.config_file, e)
        return self.default_config.copy()

    def save_config(self):
        """Save configuration to file."""
        try:
            with open(self.config_file, 'w', encoding='utf-8') as f:
                json.dump(self.config, f, indent=2, ensure_ascii=False)
        except OSError as e:
            logger.warning("Could not save config %s: %s", self.config_file, e)

    def get(self, key: str, default=None):
        """Get configuration value."""
        return self.config.get(key, default)

    def set(self, key: str, value):
        """Set configuration value."""
        self.config[key] = value

    def scan_settings(self) -> ScanSettings:
        """Scan tuning values, falling back to defaults for bad entries."""
        window_size = self.config.get('window_size')
        retire_timeout = self.config.get('retire_timeout')
        if not isinstance(window_size, int) or window_size <= 0:
            window_size = DEFAULT_WINDOW_SIZE
        if not isinstance(retire_timeout, (int, float)) or retire_timeout < 0:
            retire_timeout = DEFAULT_RETIRE_TIMEOUT
        return ScanSettings(window_size=window_size, retire_timeout=float(retire_timeout))
