from fastapi import APIRouter, Depends, Request, status

from marketplace.application.dashboard import summarize_orders
from marketplace.domain.schemas import QuoteRequestDraft, UserContext
from marketplace.interfaces.session import require_buyer

router = APIRouter(tags=["orders"])


@router.get("/orders")
async def list_orders(request: Request, user: UserContext = Depends(require_buyer)):
    orders = await request.app.state.dashboard.list_orders(user)
    return [order.model_dump(mode="json") for order in orders]


@router.get("/dashboard")
async def buyer_dashboard(request: Request, user: UserContext = Depends(require_buyer)):
    orders = await request.app.state.dashboard.list_orders(user)
    return {
        "summary": summarize_orders(orders).model_dump(),
        "recent_orders": [order.model_dump(mode="json") for order in orders[:5]],
    }


@router.delete("/orders/{order_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_order(order_id: str, request: Request, user: UserContext = Depends(require_buyer)):
    await request.app.state.dashboard.delete_order(user, order_id)


@router.post("/quotes", status_code=status.HTTP_201_CREATED)
async def request_quote(payload: QuoteRequestDraft, request: Request, user: UserContext = Depends(require_buyer)):
    quote = await request.app.state.quote_service.request_quote(user, payload)
    return quote.model_dump(mode="json")
