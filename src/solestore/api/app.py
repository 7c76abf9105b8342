"""SoleStore FastAPI application factory.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from solestore.api.errors import register_error_handlers
from solestore.domain import shop
from solestore.identity.tokens import TokenService
from solestore.ordering.order.placement import OrderPlacement
from solestore.settings import ShopSettings, get_settings
from solestore.utils.logging import add_context, clear_context


def create_app(settings: ShopSettings | None = None) -> FastAPI:
    """Build the application around an explicit settings object.

    The token service and the order workflow are constructed here, once, from
    `settings` and shared by all requests through `app.state`. The domain must
    already be initialised (`shop.init()`).
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Footwear store: accounts, catalogue, cart, orders and reviews",
    )
    app.state.settings = settings
    app.state.tokens = TokenService.from_settings(settings)
    app.state.placement = OrderPlacement.from_settings(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def domain_context_middleware(request: Request, call_next):
        """Push the Protean domain context for each request."""
        add_context(method=request.method, path=request.url.path)
        try:
            with shop.domain_context():
                response = await call_next(request)
        finally:
            clear_context()
        return response

    register_error_handlers(app)

    from solestore.catalogue.api import product_router
    from solestore.identity.api import auth_router, user_router
    from solestore.ordering.api import cart_router, order_router
    from solestore.reviews.api import review_router

    app.include_router(auth_router)
    app.include_router(user_router)
    app.include_router(product_router)
    app.include_router(cart_router)
    app.include_router(order_router)
    app.include_router(review_router)

    @app.get("/health")
    async def health():
        return JSONResponse(content={"status": "ok", "domain": shop.name})

    return app
