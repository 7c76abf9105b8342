"""SoleStore domain: catalogue, identity, cart, orders and reviews.

A single domain hosts every aggregate so that order placement can reserve
stock, persist the order and empty the cart inside one unit of work.
"""

from protean.domain import Domain

from solestore.utils.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

shop = Domain(name="solestore")
