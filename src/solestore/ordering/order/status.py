"""Order status engine: transitions, cancellation and deletion.

Cancelling or deleting an order that still holds stock (Pending or
Processing) returns every line's units to the catalogue in the same unit
of work as the status change.
"""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from solestore.catalogue.product.stock import increment_stock
from solestore.domain import shop
from solestore.identity.access import Principal
from solestore.ordering.order.order import Order, OrderStatus, parse_status
from solestore.utils.logging import get_logger

logger = get_logger(__name__)


@shop.command(part_of="Order")
class ChangeOrderStatus:
    order_id = Identifier(required=True)
    status = String(required=True, max_length=20)


@shop.command(part_of="Order")
class DeleteOrder:
    order_id = Identifier(required=True)
    requested_by = Identifier(required=True)
    requester_role = String(required=True, max_length=10)


def _restore_stock(order):
    for line in order.lines:
        try:
            increment_stock(line.product_id, line.quantity)
        except ObjectNotFoundError:
            # Product removed from the catalogue since the order was placed
            logger.warning(
                "stock_restore_skipped",
                order_id=str(order.id),
                product_id=str(line.product_id),
                quantity=line.quantity,
            )


@shop.command_handler(part_of=Order)
class OrderStatusHandler:
    @handle(ChangeOrderStatus)
    def change_status(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)

        target = parse_status(command.status)
        previous = order.transition_to(target.value)
        if target == OrderStatus.CANCELLED:
            _restore_stock(order)
        repo.add(order)

        logger.info(
            "order_status_changed",
            order_id=str(order.id),
            previous_status=previous,
            new_status=order.status,
        )
        return str(order.id)

    @handle(DeleteOrder)
    def delete_order(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)

        requester = Principal(user_id=command.requested_by, role=command.requester_role)
        requester.ensure_owner_or_admin(order.user_id, "Access denied - You can only delete your own orders")

        restored = order.holds_stock
        if restored:
            _restore_stock(order)
        repo._dao.delete(order)

        logger.info(
            "order_deleted",
            order_id=str(order.id),
            status=order.status,
            stock_restored=restored,
        )
