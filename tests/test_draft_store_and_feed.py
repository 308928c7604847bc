from marketplace.domain.schemas import ChangeEvent, OrderDraft, Urgency
from marketplace.infrastructure.change_feed import ChangeFeed
from marketplace.infrastructure.draft_store import STATE_CREATING_ORDERS, STATE_IDLE, CheckoutDraftStore


class TestCheckoutDraftStore:
    def test_without_redis_url_uses_ram(self):
        store = CheckoutDraftStore(redis_url=None)
        assert store.redis_available is False

    def test_unreachable_redis_falls_back_to_ram(self):
        store = CheckoutDraftStore(redis_url="redis://127.0.0.1:1/0")
        assert store.redis_available is False
        store.set_state("u1", STATE_CREATING_ORDERS)
        assert store.get_state("u1") == STATE_CREATING_ORDERS

    def test_state_defaults_to_idle(self, draft_store):
        assert draft_store.get_state("nobody") == STATE_IDLE

    def test_draft_round_trip_and_discard(self, draft_store):
        draft = OrderDraft(contact_person="Ada", urgency=Urgency.EMERGENCY)
        draft_store.save_draft("u1", draft)
        assert draft_store.get_draft("u1") == draft
        draft_store.discard_draft("u1")
        assert draft_store.get_draft("u1") is None

    def test_clear_session_forgets_everything(self, draft_store):
        draft_store.save_draft("u1", OrderDraft())
        draft_store.set_state("u1", STATE_CREATING_ORDERS)
        draft_store.clear_session("u1")
        assert draft_store.get_draft("u1") is None
        assert draft_store.get_state("u1") == STATE_IDLE


class TestChangeFeed:
    def test_subscriber_only_sees_own_rows(self):
        feed = ChangeFeed()
        seen = []
        feed.subscribe("orders", seen.append, filters={"user_id": "u1"})

        feed.publish(ChangeEvent(event_type="INSERT", table="orders", new={"id": "a", "user_id": "u1"}))
        feed.publish(ChangeEvent(event_type="INSERT", table="orders", new={"id": "b", "user_id": "u2"}))
        feed.publish(ChangeEvent(event_type="INSERT", table="quote_requests", new={"id": "c", "user_id": "u1"}))

        assert [e.new["id"] for e in seen] == ["a"]

    def test_unsubscribe_stops_delivery(self):
        feed = ChangeFeed()
        seen = []
        subscription = feed.subscribe("orders", seen.append)
        subscription.unsubscribe()
        feed.publish(ChangeEvent(event_type="DELETE", table="orders", old={"id": "a"}))
        assert seen == []

    def test_failing_callback_does_not_block_others(self):
        feed = ChangeFeed()
        seen = []

        def broken(event):
            raise RuntimeError("boom")

        feed.subscribe("orders", broken)
        feed.subscribe("orders", seen.append)
        feed.publish(ChangeEvent(event_type="DELETE", table="orders", old={"id": "a"}))
        assert len(seen) == 1

    def test_watched_list_follows_events(self):
        feed = ChangeFeed()
        live = feed.watch("orders", initial=[{"id": "o1", "user_id": "u1", "status": "pending"}],
                          filters={"user_id": "u1"})

        feed.publish(ChangeEvent(event_type="INSERT", table="orders",
                                 new={"id": "o2", "user_id": "u1", "status": "pending"}))
        feed.publish(ChangeEvent(event_type="UPDATE", table="orders",
                                 new={"id": "o1", "user_id": "u1", "status": "approved"}))
        assert live.rows == [
            {"id": "o2", "user_id": "u1", "status": "pending"},
            {"id": "o1", "user_id": "u1", "status": "approved"},
        ]

        live.close()
        feed.publish(ChangeEvent(event_type="DELETE", table="orders", old={"id": "o1", "user_id": "u1"}))
        assert len(live.rows) == 2
