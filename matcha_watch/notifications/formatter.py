from __future__ import annotations

from html import escape
from typing import List

from matcha_watch.crawlers.base import Product

INTRO_LINE = "<p>Check out these matcha products!</p>"
CLOSING_LINE = "<p>Have a great day!</p>"


def _format_item(product: Product) -> str:
    heading = escape(product.name)
    if product.code:
        heading += f" (Item code '{escape(product.code)}')"

    line = f"<li><strong>{heading}</strong>"
    detail = product.maker or product.description
    if detail:
        line += f": {escape(detail)}"

    if product.url:
        url = escape(product.url, quote=True)
        line += f'\n<ul><li><a href="{url}">{escape(product.url)}</a></li></ul>'
    return line + "</li>"


def format_product_digest(products: List[Product]) -> str:
    """Render the HTML body of the digest email.

    Returns:
        HTML string with one list item per product in input order, or "" for
        an empty list.
    """
    if not products:
        return ""

    lines = [INTRO_LINE, "", "<ul>"]
    lines.extend(_format_item(product) for product in products)
    lines.extend(["</ul>", "", CLOSING_LINE])
    return "\n".join(lines)
