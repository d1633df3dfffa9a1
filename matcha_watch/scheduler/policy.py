from __future__ import annotations

from abc import ABC, abstractmethod

from matcha_watch.config import Settings


class FailurePolicy(ABC):
    """Decides whether the loop survives a failed iteration."""

    @abstractmethod
    def should_continue(self, error: Exception, consecutive_failures: int) -> bool:
        ...


class AbortPolicy(FailurePolicy):
    """Fail fast: the first failed iteration stops the job."""

    def should_continue(self, error: Exception, consecutive_failures: int) -> bool:
        return False


class RetryPolicy(FailurePolicy):
    """Keep going until ``max_consecutive_failures`` iterations fail in a row.

    The retry is the next scheduled run, one full interval later.
    """

    def __init__(self, max_consecutive_failures: int = 3):
        if max_consecutive_failures < 1:
            raise ValueError("max_consecutive_failures must be at least 1")
        self.max_consecutive_failures = max_consecutive_failures

    def should_continue(self, error: Exception, consecutive_failures: int) -> bool:
        return consecutive_failures < self.max_consecutive_failures


def build_policy(settings: Settings) -> FailurePolicy:
    if settings.failure_policy == "retry":
        return RetryPolicy(settings.max_consecutive_failures)
    return AbortPolicy()
