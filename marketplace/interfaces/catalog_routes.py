from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from marketplace.domain.schemas import UserContext
from marketplace.interfaces.session import require_buyer

router = APIRouter(tags=["catalog"])


@router.get("/products")
async def list_products(request: Request, q: Optional[str] = Query(None), category: Optional[str] = Query(None),
                        user: UserContext = Depends(require_buyer)):
    """Active products, matched on name, supplier or description; ``category=all`` lists everything."""
    products = await request.app.state.cart_service.browse_catalog(q, category)
    return [product.model_dump(mode="json") for product in products]
