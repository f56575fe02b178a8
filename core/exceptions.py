# core/exceptions.py

"""Exceptions raised by the text search core."""


class SearchError(Exception):
    """Base class for search errors."""
    pass


class PatternEncodingError(SearchError, ValueError):
    """The search text cannot be converted to bytes with the chosen encoding."""

    def __init__(self, text: str, encoding: str, reason: str = ""):
        self.text = text
        self.encoding = encoding
        message = f"Cannot encode search text with '{encoding}'"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class EmptyPatternError(SearchError, ValueError):
    """An empty byte pattern was passed to the search core."""
    pass
