import logging
from dataclasses import asdict

from fastapi import APIRouter, Depends, Request, status

from marketplace.domain.schemas import OrderDraft, UserContext
from marketplace.interfaces.session import require_buyer

router = APIRouter(prefix="/checkout", tags=["checkout"])
logger = logging.getLogger(__name__)


@router.get("/draft")
async def get_draft(request: Request, user: UserContext = Depends(require_buyer)):
    """Form contents kept from the last attempt, plus the checkout state."""
    store = request.app.state.draft_store
    draft = store.get_draft(user.id) or OrderDraft()
    return {"state": store.get_state(user.id), "draft": draft.model_dump(mode="json")}


@router.put("/draft")
async def save_draft(draft: OrderDraft, request: Request, user: UserContext = Depends(require_buyer)):
    request.app.state.draft_store.save_draft(user.id, draft)
    return {"draft": draft.model_dump(mode="json")}


@router.delete("/draft", status_code=status.HTTP_204_NO_CONTENT)
async def reset_checkout(request: Request, user: UserContext = Depends(require_buyer)):
    request.app.state.draft_store.clear_session(user.id)


@router.post("")
async def submit_checkout(draft: OrderDraft, request: Request, user: UserContext = Depends(require_buyer)):
    # Cart snapshot is read once here and handed to the orchestrator explicitly
    items = await request.app.state.cart_service.load_cart(user)
    result = await request.app.state.orchestrator.submit(user, items, draft)
    logger.info(f"📦 {user.id} placed {len(result.orders)} order(s)")
    return {
        "orders": [order.model_dump(mode="json") for order in result.orders],
        "totals": asdict(result.totals),
    }
