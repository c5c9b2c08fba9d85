"""Custom exception hierarchy for font resolution and installation."""

from __future__ import annotations

from collections.abc import Sequence


class FontsmithError(RuntimeError):
    """Base exception for fontsmith failures.

    Raised directly for generic failures that have no dedicated subclass,
    such as a catalog variant that lists no downloadable file.
    """


class SourceConnectionError(FontsmithError):
    """Raised when a remote endpoint cannot be reached."""


class RemoteRejectedError(FontsmithError):
    """Raised when a remote endpoint answers with a non-success status."""

    def __init__(self, url: str, status_code: int, reason: str | None = None) -> None:
        detail = f" {reason}" if reason else ""
        super().__init__(f"Request to '{url}' was rejected with HTTP {status_code}{detail}.")
        self.url = url
        self.status_code = status_code


class SerialisationError(FontsmithError):
    """Raised when data cannot be written in its persisted form."""


class DeserialisationError(FontsmithError, ValueError):
    """Raised when persisted or user supplied data cannot be decoded."""


class NotFoundError(FontsmithError):
    """Raised when a requested item does not exist."""


class CatalogMissingError(NotFoundError):
    """Raised when a source has no cached catalog yet."""

    def __init__(self, source_id: str) -> None:
        super().__init__(
            f"No catalog cached for source '{source_id}'. Run 'fontsmith refresh' first."
        )
        self.source_id = source_id


class NoSuchFamilyError(NotFoundError):
    """Raised when a catalog does not list the requested family."""

    def __init__(self, font_id: str, source_id: str | None = None) -> None:
        where = f" in source '{source_id}'" if source_id else ""
        super().__init__(f"No such family '{font_id}'{where}.")
        self.font_id = font_id
        self.source_id = source_id


class NoMatchingVariantError(NotFoundError):
    """Raised when none of a family's variants satisfies the requested filters."""


class ConfigurationError(FontsmithError):
    """Raised when the configuration file cannot be loaded or validated."""


class FontSpecError(FontsmithError, ValueError):
    """Raised when a font request string is malformed."""


class UnknownSourceError(FontsmithError, KeyError):
    """Raised when a source id does not match any registered backend."""

    def __init__(self, source_id: str) -> None:
        super().__init__(f"Unknown source '{source_id}'.")
        self.source_id = source_id

    def __str__(self) -> str:
        return str(self.args[0])


class ResolutionError(FontsmithError):
    """Raised when one or more fonts could not be resolved by any source."""

    def __init__(self, unresolved: Sequence[str]) -> None:
        self.unresolved = tuple(unresolved)
        count = len(self.unresolved)
        super().__init__(f"{count} font{'s' if count != 1 else ''} failed to resolve.")


class InstallError(FontsmithError):
    """Raised when one or more resolved fonts could not be acquired or installed."""

    def __init__(self, failed: Sequence[str]) -> None:
        self.failed = tuple(failed)
        count = len(self.failed)
        super().__init__(f"{count} font{'s' if count != 1 else ''} failed to install.")


def exception_messages(exc: BaseException) -> list[str]:
    """Return the collected message chain for an exception and its causes."""
    messages: list[str] = []
    visited: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in visited:
        visited.add(id(current))
        text = str(current).strip()
        if text:
            first_line = text.splitlines()[0].strip()
            if first_line:
                messages.append(first_line)
        current = current.__cause__ or current.__context__
    return messages


def exception_hint(exc: BaseException) -> str | None:
    """Return the most specific message available for an exception chain."""
    messages = exception_messages(exc)
    return messages[-1] if messages else None


__all__ = [
    "CatalogMissingError",
    "ConfigurationError",
    "DeserialisationError",
    "FontSpecError",
    "FontsmithError",
    "InstallError",
    "NoMatchingVariantError",
    "NoSuchFamilyError",
    "NotFoundError",
    "RemoteRejectedError",
    "ResolutionError",
    "SerialisationError",
    "SourceConnectionError",
    "UnknownSourceError",
    "exception_messages",
    "exception_hint",
]
