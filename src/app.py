"""UhuyShop FastAPI application.

Single-domain web server that processes commands synchronously via HTTP.
Every request runs inside the storefront domain context.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

import os
from datetime import UTC, datetime
from uuid import uuid4

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# The domain is initialized at module level so uvicorn workers share it.
# PROTEAN_ENV selects the config overlay from domain.toml.
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from protean.integrations.fastapi import register_exception_handlers

from storefront.domain import storefront
from storefront.utils.logging import bind_request_context, clear_request_context, current_env, get_logger

storefront.init()

logger = get_logger(__name__)

# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="UhuyShop API",
    description="Storefront: catalogue, cart, coupons, checkout, orders, reviews and wishlist",
)

_cors_origins = [o.strip() for o in os.getenv("CORS_ORIGINS", "http://localhost:3000").split(",") if o.strip()]

app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH"],
    allow_headers=["Content-Type", "Authorization"],
)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the storefront domain context and bind a request id for log lines."""
    clear_request_context()
    bind_request_context(request_id=request.headers.get("X-Request-ID", uuid4().hex), path=request.url.path)
    try:
        with storefront.domain_context():
            response = await call_next(request)
    finally:
        clear_request_context()
    return response


register_exception_handlers(app)

# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from storefront.catalogue.api import banner_router, category_router, product_router  # noqa: E402
from storefront.identity.api import auth_router  # noqa: E402
from storefront.ordering.api import cart_router, coupon_router, order_router  # noqa: E402
from storefront.reviews.api import review_router  # noqa: E402
from storefront.wishlist.api import wishlist_router  # noqa: E402

for router in (
    auth_router,
    product_router,
    category_router,
    banner_router,
    cart_router,
    coupon_router,
    order_router,
    review_router,
    wishlist_router,
):
    app.include_router(router, prefix="/api")


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------
@app.get("/api/health")
async def health():
    return JSONResponse(
        content={
            "status": "ok",
            "domain": storefront.name,
            "environment": current_env(),
            "timestamp": datetime.now(UTC).isoformat(),
        }
    )
