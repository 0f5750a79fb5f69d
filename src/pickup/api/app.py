"""FastAPI application factory for the pickup service."""

from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from pickup.api.errors import register_exception_handlers
from pickup.api.routes import cron_router, order_router, payment_router, store_router
from pickup.domain import pickup
from pickup.services import Services, build_services
from pickup.utils.logging import log_context


def create_app(services: Services | None = None) -> FastAPI:
    app = FastAPI(
        title="Pickup API",
        description="Reserve-and-pickup order lifecycle: payment, redemption and completion",
    )
    app.state.services = services or build_services()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def domain_context_middleware(request: Request, call_next):
        """Push the pickup domain context and bind request log context."""
        request_id = request.headers.get("x-request-id") or uuid4().hex
        with log_context(request_id=request_id, path=request.url.path), pickup.domain_context():
            return await call_next(request)

    register_exception_handlers(app)

    app.include_router(payment_router)
    app.include_router(store_router)
    app.include_router(order_router)
    app.include_router(cron_router)

    @app.get("/health")
    async def health():
        return JSONResponse(content={"status": "ok", "domain": pickup.name})

    return app
