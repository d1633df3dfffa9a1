from __future__ import annotations

from typing import List, Optional

from loguru import logger
from sqlalchemy.orm import Session

from matcha_watch.crawlers.base import Product
from matcha_watch.models.notified_product import NotifiedProduct
from matcha_watch.notifications.email_sender import EmailSender


class NotificationDispatcher:
    """Sends the digest, optionally skipping products announced before.

    Without a session every match is announced on every run. With a session,
    products already recorded in ``notified_products`` are dropped and the
    rest are recorded once the email has been sent.
    """

    def __init__(self, sender: EmailSender, session: Optional[Session] = None):
        self.sender = sender
        self.session = session

    def _already_sent(self, product: Product) -> bool:
        exists = (
            self.session.query(NotifiedProduct)
            .filter_by(fingerprint=product.fingerprint)
            .first()
        )
        return exists is not None

    def _log_sent(self, products: List[Product]) -> None:
        for product in products:
            self.session.add(
                NotifiedProduct(
                    fingerprint=product.fingerprint,
                    name=product.name,
                    url=product.url,
                )
            )
        self.session.commit()

    def unsent(self, products: List[Product]) -> List[Product]:
        if self.session is None:
            return list(products)

        seen = set()
        fresh = []
        for product in products:
            if product.fingerprint in seen or self._already_sent(product):
                continue
            seen.add(product.fingerprint)
            fresh.append(product)
        return fresh

    def dispatch(self, products: List[Product]) -> int:
        """Send the digest for ``products``.

        Returns:
            Number of products announced; 0 when nothing new was left to send.
        """
        to_send = self.unsent(products)
        if not to_send:
            logger.info("All matching products were already announced, skipping email")
            return 0

        self.sender.send(to_send)
        if self.session is not None:
            self._log_sent(to_send)
        return len(to_send)
