"""ContentLexEngine exception hierarchy.

Document sources signal failures by raising the typed exceptions below.
The engine catches them at the cache boundary and converts them into
statistics events, so lookups stay total; they only escape from direct
calls to a DocumentSource.

Python 3.13+.
"""

__all__ = [
    "ContentError",
    "DocumentError",
    "DocumentMalformedError",
    "DocumentNotFoundError",
]


class ContentError(Exception):
    """Base exception for all content engine errors."""


class DocumentError(ContentError):
    """Failure loading the document for one (domain, locale) pair.

    Attributes:
        domain: Content domain name (e.g., 'card-name')
        locale: Locale code the document was requested for
    """

    def __init__(self, message: str, *, domain: str = "", locale: str = "") -> None:
        """Initialize DocumentError.

        Args:
            message: Human-readable description
            domain: Content domain name
            locale: Locale code
        """
        super().__init__(message)
        self.domain = domain
        self.locale = locale


class DocumentNotFoundError(DocumentError):
    """No document exists for the requested (domain, locale).

    Expected for partially translated locales.
    """


class DocumentMalformedError(DocumentError):
    """Document exists but is structurally invalid.

    Examples:
    - Source is not valid JSON
    - Top level is not an object
    - A value does not match the domain's DocumentShape
    """
