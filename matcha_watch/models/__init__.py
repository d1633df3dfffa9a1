from matcha_watch.models.notified_product import NotifiedProduct

__all__ = [
    "NotifiedProduct",
]
