"""Application tests for order history, listing and statistics."""

from datetime import UTC, datetime, timedelta

import pytest
from protean import current_domain

from solestore.errors import AccessDenied
from solestore.identity.access import Principal
from solestore.ordering.order.placement import OrderPlacement
from solestore.ordering.order.pricing import ShippingPolicy
from solestore.ordering.order.queries import fetch_order, list_orders, order_stats, orders_for_user
from solestore.ordering.order.status import ChangeOrderStatus

_ALICE = "9b1f2e3d-4c5b-4a69-8788-99aabbccddee"
_BOB = "1c2d3e4f-5a6b-4c7d-8e9f-a0b1c2d3e4f5"


@pytest.fixture()
def buy(make_product):
    placement = OrderPlacement(ShippingPolicy(flat_fee=10.0, free_above=100.0))
    product = make_product(price=20.0, quantity=50)

    def _buy(user_id, quantity=1):
        return placement.place(user_id, [{"product_id": str(product.id), "size": "10", "quantity": quantity}])

    return _buy


class TestOrderHistory:
    def test_only_own_orders_newest_first(self, buy):
        first = buy(_ALICE)
        buy(_BOB)
        second = buy(_ALICE, quantity=2)

        history = orders_for_user(_ALICE)
        assert [o.id for o in history] == [second.id, first.id]

    def test_empty_history(self):
        assert orders_for_user(_ALICE) == []


class TestFetchOrder:
    def test_owner_can_view(self, buy):
        order = buy(_ALICE)
        assert fetch_order(order.id, Principal(user_id=_ALICE, role="user")).id == order.id

    def test_admin_can_view(self, buy):
        order = buy(_ALICE)
        assert fetch_order(order.id, Principal(user_id=_BOB, role="admin")).id == order.id

    def test_others_are_refused(self, buy):
        order = buy(_ALICE)
        with pytest.raises(AccessDenied):
            fetch_order(order.id, Principal(user_id=_BOB, role="user"))


class TestListOrders:
    def test_pagination(self, buy):
        for _ in range(5):
            buy(_ALICE)
        page = list_orders(page=2, page_size=2)
        assert len(page.items) == 2
        assert page.total_items == 5
        assert page.total_pages == 3
        assert page.has_prev_page and page.has_next_page

    def test_status_filter(self, buy):
        cancelled = buy(_ALICE)
        buy(_BOB)
        current_domain.process(ChangeOrderStatus(order_id=cancelled.id, status="Cancelled"), asynchronous=False)

        page = list_orders(status="Cancelled")
        assert [o.id for o in page.items] == [cancelled.id]

    def test_unknown_status_filter_is_ignored(self, buy):
        buy(_ALICE)
        buy(_BOB)
        assert list_orders(status="Lost").total_items == 2

    def test_sort_by_total_ascending(self, buy):
        buy(_ALICE, quantity=3)
        buy(_ALICE, quantity=1)
        buy(_ALICE, quantity=2)
        totals = [o.total for o in list_orders(sort_by="total", sort_order="asc").items]
        assert totals == sorted(totals)


class TestOrderStats:
    def test_breakdown_and_revenue(self, buy):
        buy(_ALICE)  # 20 + 10 shipping
        buy(_BOB, quantity=2)  # 40 + 10 shipping
        cancelled = buy(_ALICE, quantity=3)  # 60 + 10 shipping
        current_domain.process(ChangeOrderStatus(order_id=cancelled.id, status="Cancelled"), asynchronous=False)

        stats = order_stats()
        assert stats["total_orders"] == 3
        assert stats["total_revenue"] == 80.0
        assert stats["status_breakdown"] == [
            {"status": "Cancelled", "count": 1, "total_amount": 70.0},
            {"status": "Pending", "count": 2, "total_amount": 80.0},
        ]

    def test_date_window(self, buy):
        buy(_ALICE)
        future = datetime.now(UTC) + timedelta(days=1)
        assert order_stats(start=future)["total_orders"] == 0
        assert order_stats(end=future)["total_orders"] == 1

    def test_naive_dates_are_treated_as_utc(self, buy):
        buy(_ALICE)
        yesterday = datetime.now(UTC).replace(tzinfo=None) - timedelta(days=1)
        assert order_stats(start=yesterday)["total_orders"] == 1

    def test_no_orders(self):
        assert order_stats() == {"status_breakdown": [], "total_orders": 0, "total_revenue": 0}
