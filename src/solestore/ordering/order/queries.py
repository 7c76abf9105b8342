"""Read-side order lookups: a buyer's history, the admin listing and revenue stats."""

from datetime import UTC

from protean.utils.globals import current_domain

from solestore.identity.access import Principal
from solestore.ordering.order.order import Order, OrderStatus
from solestore.shared.pagination import Page, fetch_all, paginate, sort_records

_SORTABLE_FIELDS = ("created_at", "updated_at", "total", "status")


def _orders():
    return current_domain.repository_for(Order)._dao.query


def _as_utc(moment):
    if moment is None:
        return None
    return moment.replace(tzinfo=UTC) if moment.tzinfo is None else moment.astimezone(UTC)


def orders_for_user(user_id) -> list[Order]:
    """Every order placed by `user_id`, newest first."""
    orders = fetch_all(_orders().filter(user_id=str(user_id)))
    return sort_records(orders, "created_at", descending=True)


def fetch_order(order_id, principal: Principal) -> Order:
    order = current_domain.repository_for(Order).get(order_id)
    principal.ensure_owner_or_admin(order.user_id, "Access denied - You can only view your own orders")
    return order


def list_orders(status=None, sort_by="created_at", sort_order="desc", page=1, page_size=20) -> Page:
    """All orders, optionally narrowed to one status. An unrecognised status is ignored."""
    queryset = _orders()
    if status in [s.value for s in OrderStatus]:
        queryset = queryset.filter(status=status)
    orders = fetch_all(queryset)

    attribute = sort_by if sort_by in _SORTABLE_FIELDS else "created_at"
    orders = sort_records(orders, attribute, descending=sort_order != "asc")
    return paginate(orders, page, page_size)


def order_stats(start=None, end=None) -> dict:
    """Order counts and amounts per status, within an optional creation window.

    Revenue counts every order except cancelled ones.
    """
    start, end = _as_utc(start), _as_utc(end)
    orders = fetch_all(_orders())
    if start is not None:
        orders = [o for o in orders if o.created_at and _as_utc(o.created_at) >= start]
    if end is not None:
        orders = [o for o in orders if o.created_at and _as_utc(o.created_at) <= end]

    breakdown = {}
    for order in orders:
        entry = breakdown.setdefault(order.status, {"status": order.status, "count": 0, "total_amount": 0.0})
        entry["count"] += 1
        entry["total_amount"] = round(entry["total_amount"] + order.total, 2)

    revenue = sum(o.total for o in orders if o.status != OrderStatus.CANCELLED.value)
    return {
        "status_breakdown": sorted(breakdown.values(), key=lambda e: e["status"]),
        "total_orders": len(orders),
        "total_revenue": round(revenue, 2),
    }
