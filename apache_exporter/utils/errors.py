"""Scrape error taxonomy."""


class ScrapeError(Exception):
    """Base class for everything that can fail during one collection cycle."""


class TransportError(ScrapeError):
    """The target could not be reached (connection, TLS, timeout)."""

    def __init__(self, uri: str, cause: BaseException):
        self.uri = uri
        self.cause = cause
        super().__init__(f"Error scraping apache: {str(cause) or type(cause).__name__}")


class ContentValidityError(ScrapeError):
    """The target answered, but not with HTTP 200."""

    def __init__(self, status_code: int, reason: str, body: bytes):
        self.status_code = status_code
        self.reason = reason
        self.body = body
        text = body.decode("utf-8", errors="replace")
        super().__init__(f"Status {status_code} {reason} ({status_code}): {text}")


class ParseError(ScrapeError):
    """A recognized field carried a value that is not a number."""

    def __init__(self, key: str, value: str):
        self.key = key
        self.value = value
        super().__init__(f"Invalid value for {key!r}: {value!r}")
