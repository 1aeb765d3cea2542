"""Package-specific exception types."""

from __future__ import annotations


class SnippetError(Exception):
    """Base class for errors raised while inlining snippets."""


class MalformedReferenceError(SnippetError, ValueError):
    """Raised when a marked link does not point at a valid line range.

    This signals an authoring mistake in the document and aborts the whole
    transform before any snippet is fetched.

    Args:
        url: The offending link target.
        reason: Short description of what is wrong with it.
    """

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(self._build_message())

    def _build_message(self) -> str:
        return (
            f"Inlining snippet points to {self.url} with an invalid reference: "
            f"{self.reason}. Expected #L<number>-L<number>"
        )


class FetchError(SnippetError):
    """Raised when the raw content of a snippet cannot be retrieved.

    Args:
        url: Raw-content URL that was requested.
        status_code: HTTP status of the response, or None for transport failures.
    """

    def __init__(self, url: str, status_code: int | None = None):
        self.url = url
        self.status_code = status_code
        if status_code is None:
            message = f"Failed to fetch {url}, skipping"
        else:
            message = f"Failed to fetch {url} (HTTP {status_code}), skipping"
        super().__init__(message)


class SerializationError(ValueError):
    """Raised when a document tree cannot be read from or written to JSON."""
