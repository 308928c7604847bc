from dataclasses import asdict

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from marketplace.domain.schemas import AddToCartRequest, QuantityUpdate, UserContext
from marketplace.interfaces.session import require_buyer

router = APIRouter(prefix="/cart", tags=["cart"])


@router.get("")
async def get_cart(request: Request, user: UserContext = Depends(require_buyer)):
    cart_service = request.app.state.cart_service
    items = await cart_service.load_cart(user)
    totals = cart_service.summarize(items)
    return {"items": [item.model_dump(mode="json") for item in items], "totals": asdict(totals)}


@router.get("/summary")
async def get_cart_summary(request: Request, user: UserContext = Depends(require_buyer)):
    cart_service = request.app.state.cart_service
    items = await cart_service.load_cart(user)
    totals = cart_service.summarize(items)
    return {"item_count": sum(item.quantity for item in items), **asdict(totals)}


@router.post("/items", status_code=status.HTTP_201_CREATED)
async def add_cart_item(payload: AddToCartRequest, request: Request, user: UserContext = Depends(require_buyer)):
    item = await request.app.state.cart_service.add_to_cart(user, payload.product_id, payload.quantity)
    return item.model_dump(mode="json")


@router.patch("/items/{item_id}")
async def update_cart_item(item_id: str, payload: QuantityUpdate, request: Request,
                           user: UserContext = Depends(require_buyer)):
    cart_service = request.app.state.cart_service
    items = await cart_service.load_cart(user)
    update = await cart_service.change_quantity(user, items, item_id, payload.quantity)
    body = {"items": [item.model_dump(mode="json") for item in update.items], "error": update.error}
    if update.error:
        return JSONResponse(status_code=status.HTTP_502_BAD_GATEWAY, content=body)
    return body


@router.delete("/items/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_cart_item(item_id: str, request: Request, user: UserContext = Depends(require_buyer)):
    await request.app.state.cart_service.remove_item(user, item_id)
