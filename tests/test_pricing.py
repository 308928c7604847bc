from marketplace.domain.pricing import calculate_totals
from marketplace.domain.schemas import CartItemView, ProductInfo
from tests.fakes import build_item


def test_empty_cart_still_pays_delivery():
    totals = calculate_totals([])
    assert totals.subtotal == 0
    assert totals.delivery_fee == 5000
    assert totals.total == 5000


def test_subtotal_is_price_times_quantity():
    items = [build_item("a", price=20000, quantity=2), build_item("b", price=1500, quantity=3)]
    totals = calculate_totals(items)
    assert totals.subtotal == 44500
    assert totals.total == totals.subtotal + totals.delivery_fee


def test_threshold_is_strict():
    at_threshold = calculate_totals([build_item("a", price=100000)])
    assert at_threshold.delivery_fee == 5000
    assert at_threshold.total == 105000

    above = calculate_totals([build_item("a", price=100001)])
    assert above.delivery_fee == 0
    assert above.total == 100001


def test_large_single_supplier_order_ships_free():
    totals = calculate_totals([build_item("a", supplier_id="S1", price=60000, quantity=2)])
    assert (totals.subtotal, totals.delivery_fee, totals.total) == (120000, 0, 120000)


def test_missing_price_counts_as_zero():
    items = [
        CartItemView(id="x", user_id="u", product_id="p", quantity=4, product=None),
        CartItemView(id="y", user_id="u", product_id="q", quantity=2, product=ProductInfo(name="No price")),
        build_item("z", price=250, quantity=2),
    ]
    assert calculate_totals(items).subtotal == 500


def test_overrides_take_precedence_over_settings():
    totals = calculate_totals([build_item("a", price=50)], free_delivery_threshold=10, delivery_fee=99)
    assert totals.delivery_fee == 0
    totals = calculate_totals([build_item("a", price=5)], free_delivery_threshold=10, delivery_fee=99)
    assert totals.total == 104


def test_repeated_calls_give_identical_results_and_leave_items_alone():
    items = [build_item("a", price=30000, quantity=2), build_item("b", price=999, quantity=1)]
    before = [item.model_dump() for item in items]
    assert calculate_totals(items) == calculate_totals(items)
    assert [item.model_dump() for item in items] == before
