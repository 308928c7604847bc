import logging
import time
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import Depends, FastAPI, status
from fastapi.requests import Request
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.templating import Jinja2Templates
from sqlalchemy.exc import OperationalError
from marketplace.core.config import settings

# 1. Infrastructure & Domain Imports
from marketplace.domain.errors import (
    AuthenticationError,
    CartClearError,
    CartOperationError,
    MarketplaceError,
    NotFoundError,
    OrderCreateError,
    OrderValidationError,
)
from marketplace.domain.models import Order
from marketplace.domain.schemas import UserContext
from marketplace.infrastructure.change_feed import ChangeFeed
from marketplace.infrastructure.database import Base, SessionLocal, engine
from marketplace.infrastructure.draft_store import draft_store as default_draft_store
from marketplace.infrastructure.repositories.cart_repository import SqlAlchemyCartRepository
from marketplace.infrastructure.repositories.order_repository import SqlAlchemyOrderRepository
from marketplace.infrastructure.repositories.quote_repository import SqlAlchemyQuoteRepository
from marketplace.application.cart_service import CartService
from marketplace.application.dashboard import BuyerDashboard
from marketplace.application.orchestrator import OrderSubmissionOrchestrator
from marketplace.application.quote_service import QuoteService
from marketplace.interfaces import cart_routes, catalog_routes, checkout_routes, order_routes
from marketplace.interfaces.session import require_admin

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent / "templates"))

# ---------------------------------------------------------
# DATABASE CONNECTION (With Retry Logic)
# ---------------------------------------------------------
MAX_RETRIES = 10
WAIT_SECONDS = 3


def try_create_tables(retries: int = MAX_RETRIES, delay: int = WAIT_SECONDS) -> bool:
    for attempt in range(1, retries + 1):
        try:
            logger.info(f"🔄 Attempting DB connection ({attempt}/{retries})...")
            Base.metadata.create_all(bind=engine)
            logger.info("✅ DB Connected and Tables Created.")
            return True
        except OperationalError as e:
            logger.warning(f"⚠️ DB not ready yet ({e}). Waiting {delay}s...")
            if attempt < retries:
                time.sleep(delay)
    logger.error("❌ Could not connect to DB after retries.")
    return False


@asynccontextmanager
async def lifespan(app: FastAPI):
    if not try_create_tables() and settings.ENVIRONMENT in ("production", "prod"):
        raise RuntimeError("Cannot start application: database tables creation failed")
    yield
    engine.dispose()


# ---------------------------------------------------------
# ERROR MAPPING
# ---------------------------------------------------------

def _status_for(exc: MarketplaceError) -> int:
    if isinstance(exc, OrderValidationError):
        return 422
    if isinstance(exc, AuthenticationError):
        return status.HTTP_401_UNAUTHORIZED
    if isinstance(exc, NotFoundError):
        return status.HTTP_404_NOT_FOUND
    if isinstance(exc, (OrderCreateError, CartClearError, CartOperationError)):
        return status.HTTP_502_BAD_GATEWAY
    return status.HTTP_400_BAD_REQUEST


async def marketplace_error_handler(request: Request, exc: MarketplaceError):
    body = {"status": "error", "message": exc.message}
    if isinstance(exc, OrderValidationError):
        body["errors"] = exc.messages
    if isinstance(exc, OrderCreateError):
        body["failures"] = exc.failures
        body["orders_created"] = [o.id for o in exc.created_orders]
    if isinstance(exc, CartClearError):
        # Orders went through; only the cleanup failed
        body["orders_created"] = [o.id for o in exc.created_orders]
    return JSONResponse(status_code=_status_for(exc), content=body)


# ---------------------------------------------------------
# COMPOSITION ROOT
# ---------------------------------------------------------

def create_app(cart_repo=None, order_repo=None, quote_repo=None, draft_store=None, change_feed=None) -> FastAPI:
    app = FastAPI(title=settings.PROJECT_NAME, lifespan=lifespan)

    change_feed = change_feed or ChangeFeed()
    cart_repo = cart_repo or SqlAlchemyCartRepository(change_feed=change_feed)
    order_repo = order_repo or SqlAlchemyOrderRepository(change_feed=change_feed)
    quote_repo = quote_repo or SqlAlchemyQuoteRepository(change_feed=change_feed)
    draft_store = draft_store or default_draft_store

    app.state.change_feed = change_feed
    app.state.draft_store = draft_store
    app.state.cart_service = CartService(cart_repo)
    app.state.orchestrator = OrderSubmissionOrchestrator(order_repo=order_repo, cart_repo=cart_repo,
                                                         draft_store=draft_store)
    app.state.quote_service = QuoteService(quote_repo, catalog=cart_repo)
    app.state.dashboard = BuyerDashboard(order_repo)

    app.add_exception_handler(MarketplaceError, marketplace_error_handler)

    # Include Routers
    app.include_router(catalog_routes.router)
    app.include_router(cart_routes.router)
    app.include_router(checkout_routes.router)
    app.include_router(order_routes.router)

    @app.get("/")
    def health_check():
        return {"status": "active", "system": "Procurement Marketplace Orders"}

    @app.get("/admin/orders", response_class=HTMLResponse)
    def read_orders(request: Request, user: UserContext = Depends(require_admin)):
        db = SessionLocal()
        try:
            # Get latest 20 orders
            orders = db.query(Order).order_by(Order.created_at.desc()).limit(20).all()
            return templates.TemplateResponse(request, "dashboard.html", {"orders": orders})
        finally:
            db.close()

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("marketplace.main:app", host="0.0.0.0", port=8000, reload=settings.ENVIRONMENT == "development")
