import json
import logging

import redis
from redis.exceptions import RedisError
from marketplace.core.config import settings
from marketplace.domain.schemas import OrderDraft

logger = logging.getLogger(__name__)

# Checkout states per buyer
STATE_IDLE = "IDLE"
STATE_VALIDATING = "VALIDATING"
STATE_CREATING_ORDERS = "CREATING_ORDERS"
STATE_CLEARING_CART = "CLEARING_CART"
STATE_SUCCESS = "SUCCESS"

class CheckoutDraftStore:
    """
    Keeps each buyer's checkout form and checkout state between requests, so a
    failed submission can be retried without re-entering the form.
    Redis first, process memory when Redis is missing or failing.
    """

    def __init__(self, redis_url: str | None = None, ttl: int | None = None):
        self.redis = None
        self.redis_available = False
        self.ttl = ttl or settings.DRAFT_TTL_SECONDS

        if redis_url:
            try:
                self.redis = redis.from_url(
                    redis_url,
                    decode_responses=True,
                    socket_connect_timeout=1  # Fail fast if Redis is down
                )
                self.redis.ping()
                self.redis_available = True
                logger.info("✅ CheckoutDraftStore: Connected to Redis.")
            except (RedisError, ValueError) as e:
                logger.warning(f"⚠️ CheckoutDraftStore: Redis unreachable ({e}). Using RAM fallback.")
                self.redis_available = False
        else:
            logger.info("CheckoutDraftStore: no REDIS_URL configured, keeping drafts in RAM.")

        self._memory_store = {}

    # ---------------------------------------------------------
    # STATE
    # ---------------------------------------------------------

    def get_state(self, user_id: str) -> str:
        key = f"checkout:{user_id}:state"
        if self.redis_available:
            try:
                state = self.redis.get(key)
                if state:
                    return state
            except RedisError as e:
                self._handle_redis_error(e)
        return self._memory_store.get(key, STATE_IDLE)

    def set_state(self, user_id: str, new_state: str):
        key = f"checkout:{user_id}:state"
        logger.debug(f"Checkout {user_id} -> {new_state}")
        if self.redis_available:
            try:
                self.redis.setex(key, self.ttl, new_state)
            except RedisError as e:
                self._handle_redis_error(e)
        # RAM copy survives a Redis outage mid-checkout
        self._memory_store[key] = new_state

    # ---------------------------------------------------------
    # DRAFT
    # ---------------------------------------------------------

    def get_draft(self, user_id: str) -> OrderDraft | None:
        key = f"checkout:{user_id}:draft"
        if self.redis_available:
            try:
                data = self.redis.get(key)
                if data:
                    return OrderDraft.model_validate(json.loads(data))
            except RedisError as e:
                self._handle_redis_error(e)

        ram_data = self._memory_store.get(key)
        return OrderDraft.model_validate(ram_data) if ram_data else None

    def save_draft(self, user_id: str, draft: OrderDraft):
        key = f"checkout:{user_id}:draft"
        payload = draft.model_dump(mode="json")
        if self.redis_available:
            try:
                self.redis.setex(key, self.ttl, json.dumps(payload))
            except RedisError as e:
                self._handle_redis_error(e)
        self._memory_store[key] = payload

    def discard_draft(self, user_id: str):
        key = f"checkout:{user_id}:draft"
        if self.redis_available:
            try:
                self.redis.delete(key)
            except RedisError as e:
                self._handle_redis_error(e)
        self._memory_store.pop(key, None)

    def clear_session(self, user_id: str):
        """Forget both state and draft when the buyer abandons checkout."""
        self.discard_draft(user_id)
        key = f"checkout:{user_id}:state"
        if self.redis_available:
            try:
                self.redis.delete(key)
            except RedisError as e:
                self._handle_redis_error(e)
        self._memory_store.pop(key, None)

    def _handle_redis_error(self, e):
        """Log and stop trying Redis for the rest of the process lifetime."""
        logger.error(f"❌ Redis Error: {e}. Switching to RAM mode.")
        self.redis_available = False

# Global Instance
draft_store = CheckoutDraftStore(redis_url=settings.REDIS_URL)
