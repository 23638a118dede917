"""Cart API application.

Serves one device's cart to the ordering UI. The Protean domain context is
pushed around every request so value objects resolve against the ordering
domain.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ordering import config
from ordering.cart.cart import Cart
from ordering.cart.storage import JsonFileCartStore, MemoryCartStore
from ordering.checkout.account import Account
from ordering.checkout.checkout import Checkout
from ordering.domain import ordering
from ordering.service import get_order_service
from ordering.service.port import OrderServiceError
from ordering.utils.logging import bind_account, configure_logging

ordering.init()

logger = structlog.get_logger(__name__)


def build_checkout() -> Checkout:
    """Assemble a checkout from environment configuration."""
    store_dir = config.cart_store_dir()
    store = JsonFileCartStore(store_dir, config.cart_device_id()) if store_dir else MemoryCartStore()
    with ordering.domain_context():
        account = Account(user_id=config.account_id(), privileged=config.account_privileged())
        cart = Cart.load(store)
        checkout = Checkout(cart=cart, service=get_order_service(), account=account)
        try:
            checkout.sync()
        except OrderServiceError as exc:
            logger.warning("Order service unavailable at startup", error=exc.message)
        return checkout


def create_app(checkout: Checkout) -> FastAPI:
    app = FastAPI(
        title="Butcher Counter Cart API",
        description="Cart composition, eligibility and checkout for the ordering UI",
    )
    app.state.checkout = checkout

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def domain_context_middleware(request: Request, call_next):
        """Push the ordering domain context for each request."""
        with ordering.domain_context():
            return await call_next(request)

    from ordering.api.routes import cart_router

    app.include_router(cart_router)

    @app.get("/health")
    async def health():
        return JSONResponse(
            content={
                "status": "ok",
                "domain": ordering.name,
                "account": checkout.account.user_id,
            }
        )

    return app


configure_logging()
_checkout = build_checkout()
bind_account(_checkout.account.user_id)
app = create_app(_checkout)
