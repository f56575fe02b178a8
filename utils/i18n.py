# utils/i18n.py

"""Internationalization support."""
import locale
import logging
from typing import Dict

logger = logging.getLogger(__name__)


class Translator:
    """Simple translation system for multilingual support."""

    def __init__(self):
        self.current_lang = 'en'
        self.translations: Dict[str, Dict[str, str]] = {
            'en': {
                # Search window
                'app_title': 'Find Text in Files',
                'text_to_search': 'Text to search:',
                'charset': 'Charset:',
                'find_button': 'Find',
                'search_results': 'Found Files',
                'open_file': 'Open File',
                'open_folder': 'Open Folder',
                'copy_path': 'Copy Path',

                # Status
                'ready_status': 'Enter at least {} characters',
                'searching_status': 'Searching {}...',
                'found_status': 'Found {} file(s)',
                'cancelled_status': 'Search cancelled, {} file(s) found',
                'path_copied': 'Copied path: {}',

                # Command line
                'no_matches': 'No matching files found.',
                'matches_summary': 'Found {} matching file(s).',
                'scanning': 'Scanning',
                'interrupted': 'Search interrupted by user.',

                # Errors
                'error': 'Error',
                'encoding_error': 'Cannot encode the text:\n{}',
                'text_too_short': 'Search text must have at least {} characters.',
                'invalid_root': 'Path does not exist: {}',
                'file_not_found': 'File no longer exists:\n{}',
            },
            'de': {
                # Suchfenster
                'app_title': 'Text in Dateien suchen',
                'text_to_search': 'Zu suchender Text:',
                'charset': 'Zeichensatz:',
                'find_button': 'Suchen',
                'search_results': 'Gefundene Dateien',
                'open_file': 'Datei öffnen',
                'open_folder': 'Ordner öffnen',
                'copy_path': 'Pfad kopieren',

                # Status
                'ready_status': 'Mindestens {} Zeichen eingeben',
                'searching_status': 'Durchsuche {}...',
                'found_status': '{} Datei(en) gefunden',
                'cancelled_status': 'Suche abgebrochen, {} Datei(en) gefunden',
                'path_copied': 'Pfad kopiert: {}',

                # Kommandozeile
                'no_matches': 'Keine passenden Dateien gefunden.',
                'matches_summary': '{} passende Datei(en) gefunden.',
                'scanning': 'Durchsuche',
                'interrupted': 'Suche vom Benutzer abgebrochen.',

                # Fehler
                'error': 'Fehler',
                'encoding_error': 'Text kann nicht kodiert werden:\n{}',
                'text_too_short': 'Suchtext muss mindestens {} Zeichen haben.',
                'invalid_root': 'Pfad existiert nicht: {}',
                'file_not_found': 'Datei existiert nicht mehr:\n{}',
            }
        }

        # Auto-detect system language
        try:
            system_lang = locale.getlocale()[0]
        except ValueError:
            system_lang = None
        if system_lang and system_lang.startswith('de'):
            self.current_lang = 'de'

    def set_language(self, lang_code: str):
        """Set the current language."""
        if lang_code in self.translations:
            self.current_lang = lang_code
        else:
            logger.debug("Unknown language %r, keeping %s", lang_code, self.current_lang)

    def get(self, key: str, *args) -> str:
        """Get translated string, with optional formatting."""
        text = self.translations[self.current_lang].get(key, key)
        if args:
            try:
                return text.format(*args)
            except (IndexError, KeyError, ValueError):
                return text
        return text


# Global translator instance
translator = Translator()
