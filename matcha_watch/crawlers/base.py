from __future__ import annotations

import hashlib
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional

from bs4 import BeautifulSoup, Tag

# CSS selector for one product in the catalog page
LISTING_SELECTOR = ".product"


@dataclass
class Product:
    name: str
    url: Optional[str] = None
    description: Optional[str] = None
    code: Optional[str] = None
    maker: Optional[str] = None
    ingredients: Optional[str] = None

    @property
    def fingerprint(self) -> str:
        """Content hash identifying the product across iterations."""
        key = f"{self.name}\x1f{self.code or self.url or ''}"
        return hashlib.sha256(key.encode("utf-8")).hexdigest()


class BaseExtractor(ABC):
    parser: str = "lxml"

    def parse(self, html: str) -> BeautifulSoup:
        return BeautifulSoup(html, self.parser)

    def find_listings(self, soup: BeautifulSoup) -> List[Tag]:
        return soup.select(LISTING_SELECTOR)

    @abstractmethod
    def extract(self, html: str) -> List[Product]:
        """Parse a listing page into products, in document order."""
        ...
