"""Conditional stock movements used by the order workflow.

Both functions run inside the caller's unit of work. The check and the write
happen against the unit of work's view of the record, so a decrement that
returns True is committed, or rolled back, together with the order that
caused it. If another request commits a change to the same product in the
meantime, the aggregate version check rejects the commit with
ExpectedVersionError and nothing is written.
"""

from protean.utils.globals import current_domain

from solestore.catalogue.product.product import Product


def decrement_stock(product_id, amount) -> bool:
    """Take `amount` units if, and only if, current stock still covers them.

    Returns False when the condition no longer holds; the stock level is left
    untouched in that case.
    """
    repo = current_domain.repository_for(Product)
    product = repo.get(product_id)
    if not product.has_stock_for(amount):
        return False
    product.reserve(amount)
    repo.add(product)
    return True


def increment_stock(product_id, amount) -> None:
    repo = current_domain.repository_for(Product)
    product = repo.get(product_id)
    product.release(amount)
    repo.add(product)
