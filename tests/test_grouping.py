from collections import Counter

from marketplace.domain.grouping import UNKNOWN_SUPPLIER_KEY, UNKNOWN_SUPPLIER_NAME, group_by_supplier
from marketplace.domain.schemas import CartItemView
from tests.fakes import build_item


def test_two_suppliers_two_buckets_in_first_seen_order():
    items = [
        build_item("a", supplier_id="S2"),
        build_item("b", supplier_id="S1"),
        build_item("c", supplier_id="S2"),
    ]
    buckets = group_by_supplier(items)
    assert list(buckets) == ["S2", "S1"]
    assert [i.id for i in buckets["S2"].items] == ["a", "c"]
    assert [i.id for i in buckets["S1"].items] == ["b"]


def test_grouping_is_a_partition():
    items = [build_item(str(n), supplier_id=["S1", "S2", None][n % 3]) for n in range(10)]
    buckets = group_by_supplier(items)
    grouped = [item.id for bucket in buckets.values() for item in bucket.items]
    assert Counter(grouped) == Counter(item.id for item in items)
    assert len(grouped) == len(set(grouped))


def test_items_without_supplier_go_to_unknown_bucket():
    orphan = CartItemView(id="o", user_id="u", product_id="p", quantity=1, product=None)
    buckets = group_by_supplier([orphan, build_item("n", supplier_id=None)])
    assert list(buckets) == [UNKNOWN_SUPPLIER_KEY]
    assert buckets[UNKNOWN_SUPPLIER_KEY].supplier_name == UNKNOWN_SUPPLIER_NAME
    assert len(buckets[UNKNOWN_SUPPLIER_KEY].items) == 2


def test_bucket_name_falls_back_to_supplier_id():
    buckets = group_by_supplier([build_item("a", supplier_id="S9")])
    assert buckets["S9"].supplier_name == "S9"


def test_first_display_name_wins():
    items = [
        build_item("a", supplier_id="S1"),
        build_item("b", supplier_id="S1", supplier_name="Acme Ltd"),
        build_item("c", supplier_id="S1", supplier_name="Acme Renamed"),
    ]
    assert group_by_supplier(items)["S1"].supplier_name == "Acme Ltd"


def test_empty_cart_has_no_buckets():
    assert group_by_supplier([]) == {}
