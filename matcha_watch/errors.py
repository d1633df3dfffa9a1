from __future__ import annotations


class MatchaWatchError(Exception):
    """Base class for every error raised by the checker."""


class ConfigurationError(MatchaWatchError):
    """A setting is missing or malformed. Fatal before the loop starts."""


class FetchError(MatchaWatchError):
    """A page could not be retrieved or decoded as text."""

    def __init__(self, url: str, cause: str):
        self.url = url
        self.cause = cause
        super().__init__(f"GET {url} failed: {cause}")


class ExtractionError(MatchaWatchError):
    """Reserved. Malformed listings are skipped rather than raised."""


class NotifyError(MatchaWatchError):
    """The digest email could not be delivered."""


class AddressError(NotifyError):
    pass


class MessageBuildError(NotifyError):
    pass


class RelayConnectError(NotifyError):
    pass


class SendError(NotifyError):
    pass
