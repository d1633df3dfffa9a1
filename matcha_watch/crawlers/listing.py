from __future__ import annotations

from typing import List, Optional

from loguru import logger

from matcha_watch.crawlers.base import BaseExtractor, Product
from matcha_watch.crawlers.utils import element_text, resolve_detail_url

NAME_SELECTOR = "h1, h2, h3, h4, .product-name"


class ListingExtractor(BaseExtractor):
    """Read name and description straight from the listing page."""

    def __init__(self, base_url: Optional[str] = None):
        self.base_url = base_url

    def extract(self, html: str) -> List[Product]:
        soup = self.parse(html)
        products = []
        for index, listing in enumerate(self.find_listings(soup)):
            name_element = listing.select_one(NAME_SELECTOR)
            description_element = next(
                (p for p in listing.find_all("p") if p is not name_element), None
            )
            name = element_text(name_element)
            description = element_text(description_element)
            if name is None or description is None:
                logger.debug(f"Skipping listing #{index}: missing name or description")
                continue

            url = None
            link = listing.find("a", href=True)
            if link is not None and self.base_url:
                url = resolve_detail_url(self.base_url, link["href"])

            products.append(Product(name=name, description=description, url=url))

        logger.info(f"Extracted {len(products)} products from listing page")
        return products
