"""Keyword filtering of extracted products.

Keywords within a category are OR-ed, the brand and keyword categories are
AND-ed. All comparisons are case-insensitive substring checks. An empty
category imposes no constraint.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from matcha_watch.crawlers.base import Product


@dataclass(frozen=True)
class MatchCriteria:
    brands: Tuple[str, ...] = ()
    keywords: Tuple[str, ...] = ()
    # Detail mode: keywords are tested against the ingredient list only
    match_ingredients: bool = False

    def __post_init__(self):
        object.__setattr__(self, "brands", tuple(b.lower() for b in self.brands))
        object.__setattr__(self, "keywords", tuple(k.lower() for k in self.keywords))

    @classmethod
    def from_settings(cls, settings) -> "MatchCriteria":
        if settings.extraction_mode == "listing":
            return cls(
                brands=tuple(settings.brand_keywords),
                keywords=tuple(settings.variant_keywords),
            )
        return cls(
            brands=tuple(settings.brand_keywords),
            keywords=tuple(settings.ingredient_keywords),
            match_ingredients=True,
        )


def _contains_any(texts: Iterable[Optional[str]], needles: Tuple[str, ...]) -> bool:
    if not needles:
        return True
    haystacks = [text.lower() for text in texts if text]
    return any(needle in haystack for needle in needles for haystack in haystacks)


def matches(product: Product, criteria: MatchCriteria) -> bool:
    if not _contains_any((product.name, product.maker), criteria.brands):
        return False

    if criteria.match_ingredients:
        # Unknown ingredients never satisfy a keyword
        keyword_texts = (product.ingredients,)
    else:
        keyword_texts = (product.name, product.description)
    return _contains_any(keyword_texts, criteria.keywords)


def filter_products(products: Iterable[Product], criteria: MatchCriteria) -> List[Product]:
    return [product for product in products if matches(product, criteria)]
