"""One check iteration: fetch -> extract -> filter -> notify."""
from __future__ import annotations

from typing import Optional

from loguru import logger

from matcha_watch.config import Settings
from matcha_watch.crawlers import BaseExtractor, PageFetcher, build_extractor
from matcha_watch.db.database import get_session
from matcha_watch.filters import MatchCriteria, filter_products
from matcha_watch.notifications.dispatcher import NotificationDispatcher
from matcha_watch.notifications.email_sender import EmailSender


def build_dispatcher(settings: Settings) -> NotificationDispatcher:
    session = get_session(settings.database_url) if settings.dedup_enabled else None
    return NotificationDispatcher(EmailSender(settings), session=session)


class CheckerJob:
    """Runs single check iterations against the configured listing page.

    A FetchError on the listing page or any NotifyError propagates to the
    caller; what happens next is up to the scheduler's failure policy.
    """

    def __init__(
        self,
        settings: Settings,
        fetcher: Optional[PageFetcher] = None,
        extractor: Optional[BaseExtractor] = None,
        dispatcher: Optional[NotificationDispatcher] = None,
    ):
        self.settings = settings
        self.fetcher = fetcher or PageFetcher(timeout=settings.fetch_timeout_seconds)
        self.extractor = extractor or build_extractor(settings, self.fetcher)
        self.dispatcher = dispatcher or build_dispatcher(settings)
        self.criteria = MatchCriteria.from_settings(settings)

    def run_iteration(self) -> int:
        """Returns the number of products announced (0 when no email was sent)."""
        html = self.fetcher.fetch(self.settings.products_url)

        products = self.extractor.extract(html)
        matcha_products = filter_products(products, self.criteria)
        if not matcha_products:
            logger.info("No matcha products found in this check iteration.")
            return 0

        logger.info(
            f"{len(matcha_products)} matcha products found... Sending e-mail..."
        )
        return self.dispatcher.dispatch(matcha_products)

    def close(self) -> None:
        self.fetcher.close()
        if self.dispatcher.session is not None:
            self.dispatcher.session.close()
