from __future__ import annotations

from typing import Dict, List, Optional

from loguru import logger

from matcha_watch.crawlers.base import BaseExtractor, Product
from matcha_watch.crawlers.utils import (
    PageFetcher,
    element_text,
    resolve_detail_url,
    split_info_pair,
)
from matcha_watch.errors import FetchError

NAME_SELECTOR = 'h1[itemprop="name"]'
INFO_SELECTOR = "#product-info"

# Info block label -> Product field
INFO_FIELDS = {
    "Item code": "code",
    "Maker": "maker",
    "Ingredients": "ingredients",
}


class DetailPageExtractor(BaseExtractor):
    """Follow each listing to its detail page and read the info block there."""

    def __init__(self, base_url: str, fetcher: PageFetcher):
        self.base_url = base_url
        self.fetcher = fetcher

    def extract(self, html: str) -> List[Product]:
        soup = self.parse(html)

        links = []
        for listing in self.find_listings(soup):
            anchor = listing.find("a", href=True)
            if anchor is None:
                logger.debug("Skipping listing without a link")
                continue
            links.append(resolve_detail_url(self.base_url, anchor["href"]))

        products = []
        for link in links:
            try:
                detail_html = self.fetcher.fetch(link)
            except FetchError as e:
                logger.error(f"Error retrieving product details: {e}")
                continue

            product = self.parse_detail(link, detail_html)
            if product is None:
                continue

            logger.info(
                f"Found product '{product.name}': item code={product.code}, "
                f"maker={product.maker}, ingredients={product.ingredients}, url={product.url}"
            )
            products.append(product)

        return products

    def parse_detail(self, url: str, html: str) -> Optional[Product]:
        soup = self.parse(html)

        name = element_text(soup.select_one(NAME_SELECTOR))
        if name is None:
            logger.warning(f"No product name on {url}, skipping")
            return None

        info_block = soup.select_one(INFO_SELECTOR)
        if info_block is None:
            logger.warning(f"No product info block on {url}, skipping")
            return None

        fields: Dict[str, Optional[str]] = {}
        for index, paragraph in enumerate(info_block.find_all("p")):
            key, value = split_info_pair(paragraph.get_text(" "))
            if key is None:
                logger.debug(f"Info line #{index} on {url} has no label")
                continue
            field = INFO_FIELDS.get(key)
            if field is not None:
                fields[field] = value

        return Product(name=name, url=url, **fields)
