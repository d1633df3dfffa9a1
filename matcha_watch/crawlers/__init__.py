from matcha_watch.crawlers.base import BaseExtractor, Product
from matcha_watch.crawlers.detail import DetailPageExtractor
from matcha_watch.crawlers.listing import ListingExtractor
from matcha_watch.crawlers.utils import PageFetcher


def build_extractor(settings, fetcher: PageFetcher) -> BaseExtractor:
    """Pick the extractor matching ``settings.extraction_mode``."""
    if settings.extraction_mode == "listing":
        return ListingExtractor(settings.base_url)
    return DetailPageExtractor(settings.base_url, fetcher)


__all__ = [
    "BaseExtractor",
    "DetailPageExtractor",
    "ListingExtractor",
    "PageFetcher",
    "Product",
    "build_extractor",
]
