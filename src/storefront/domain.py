"""Storefront bounded context: cart, checkout, catalogue browsing and product selection.

The cart and the checkout session are Protean aggregates; catalogue browsing
works over immutable product snapshots fetched from the store backend.
"""

import structlog
from protean.domain import Domain

storefront = Domain(name="storefront")

logger = structlog.get_logger(__name__)
