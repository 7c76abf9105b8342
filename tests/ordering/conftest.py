import threading

import pytest


@pytest.fixture()
def rival_order(monkeypatch):
    """Commit a competing order from another thread while a placement is in flight.

    Call the returned function with the placement service, a buyer and the
    rival's lines. The next placement pauses right before its first stock
    decrement, the rival runs to completion in its own domain context, then
    the paused placement carries on against the stale stock it already read.
    The rival's order, or the error it raised, lands in the returned dict.
    """
    from solestore.domain import shop
    from solestore.ordering.order import placement as placement_module

    real_decrement = placement_module.decrement_stock

    def _arm(placement, user_id, lines):
        outcome = {}

        def run_rival():
            with shop.domain_context():
                try:
                    outcome["order"] = placement.place(user_id, lines)
                except Exception as exc:
                    outcome["error"] = exc

        def decrement_after_rival(product_id, amount):
            if "started" not in outcome:
                outcome["started"] = True
                rival = threading.Thread(target=run_rival)
                rival.start()
                rival.join()
            return real_decrement(product_id, amount)

        monkeypatch.setattr(placement_module, "decrement_stock", decrement_after_rival)
        return outcome

    return _arm
