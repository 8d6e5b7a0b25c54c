"""Domain errors raised by the content stores, the local files and the sync routine."""

from typing import Optional


class ContentError(Exception):
    """Base class for content loading and persistence failures."""


class StoreError(ContentError):
    """A call to the content store failed (network, auth or malformed response)."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ContentNotFoundError(ContentError):
    """The local content file for a locale does not exist."""


class ContentParseError(ContentError):
    """The local content file exists but is not valid JSON."""


class MalformedDictionaryError(ContentError):
    """A document parsed fine but lacks the structure a Dictionary needs."""


class VersionConflictError(ContentError):
    """The stored row changed since the caller read it."""

    def __init__(self, locale: str, section: str, expected: int, actual: Optional[int]) -> None:
        super().__init__(
            f"Section {section!r} for {locale!r} is at version {actual}, expected {expected}"
        )
        self.locale = locale
        self.section = section
        self.expected = expected
        self.actual = actual


class SyncError(ContentError):
    """One or more section writes of a sync batch failed.

    Carries only counts: the batch is not rolled back, so some sections may
    already be committed.
    """

    def __init__(self, failed: int, total: int) -> None:
        super().__init__(f"{failed} of {total} section writes failed; content may be partially saved")
        self.failed = failed
        self.total = total
