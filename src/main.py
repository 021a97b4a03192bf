"""FastAPI application entry point and composition root.

Run with: uvicorn src.main:app --reload --port 8000
     or:  python -m src.main   (uvloop event loop)

create_app() builds one listing store, one service and the capability
adapters and hangs them on app.state; nothing else holds them. Tests call
create_app() with their own store to get an isolated marketplace.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from config.settings import Settings, settings
from src.ns_capability.ledger import LedgerCapability, SimulatedLedger, SolanaRpcLedger
from src.ns_capability.verification import SimulatedKycGate
from src.ns_common.errors import AppError, InternalError, ValidationError
from src.ns_common.logging_config import configure_logging
from src.ns_common.response import error_response
from src.ns_gateway.middleware.request_log import RequestLogMiddleware
from src.ns_listing.api.dev_router import dev_router, kyc_router
from src.ns_listing.api.router import router as listing_router
from src.ns_listing.application.service import ListingApplicationService
from src.ns_listing.domain.pricing import PriceSource, StaticPriceSource
from src.ns_listing.domain.repository import ListingStoreProtocol
from src.ns_listing.infrastructure.memory_store import InMemoryListingStore

logger = logging.getLogger(__name__)

VERSION = "0.1.0"


def build_ledger(cfg: Settings) -> LedgerCapability:
    if cfg.LEDGER_BACKEND == "rpc":
        return SolanaRpcLedger(cfg.SOLANA_RPC_URL, timeout=cfg.LEDGER_TIMEOUT_SECONDS)
    return SimulatedLedger()


def _error_json(request: Request, exc: AppError) -> JSONResponse:
    resp = error_response(exc.code, exc.message, exc.data)
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return JSONResponse(status_code=exc.http_status, content=resp.model_dump())


def _field_errors(exc: RequestValidationError) -> list[dict[str, str]]:
    errors = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part != "body"]
        errors.append({"field": ".".join(loc) or "body", "message": err.get("msg", "invalid")})
    return errors


def create_app(
    cfg: Settings | None = None,
    store: ListingStoreProtocol | None = None,
    ledger: LedgerCapability | None = None,
    prices: PriceSource | None = None,
    kyc_gate: SimulatedKycGate | None = None,
) -> FastAPI:
    cfg = cfg or settings
    seed = store is None and cfg.SEED_EXAMPLE_LISTINGS
    store = store if store is not None else InMemoryListingStore()
    ledger = ledger or build_ledger(cfg)
    kyc_gate = kyc_gate or SimulatedKycGate(delay=cfg.KYC_DELAY_SECONDS)
    service = ListingApplicationService(
        store,
        prices=prices or StaticPriceSource(),
        verification=kyc_gate if cfg.KYC_ENFORCED else None,
    )
    if seed:
        service.seed_examples()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Startup: report ledger reachability. Shutdown: close ledger client."""
        status = await ledger.get_network_status()
        logger.info("%s started (ledger %s)", cfg.APP_NAME, status.value)
        yield
        if isinstance(ledger, SolanaRpcLedger):
            await ledger.close()

    app = FastAPI(title=cfg.APP_NAME, version=VERSION, debug=cfg.DEBUG, lifespan=lifespan)
    app.state.settings = cfg
    app.state.listing_service = service
    app.state.ledger = ledger
    app.state.kyc_gate = kyc_gate

    app.add_middleware(RequestLogMiddleware)

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        if exc.http_status >= 500:
            logger.error("%s failed: %s", request.url.path, exc.message)
        return _error_json(request, exc)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return _error_json(request, ValidationError(_field_errors(exc)))

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s", request.url.path)
        return _error_json(request, InternalError())

    app.include_router(listing_router, prefix=cfg.API_PREFIX)
    app.include_router(dev_router, prefix=cfg.API_PREFIX)
    app.include_router(kyc_router, prefix=cfg.API_PREFIX)

    @app.get("/health")
    async def health() -> dict[str, Any]:
        status = await ledger.get_network_status()
        return {"status": "ok", "version": VERSION, "ledger": status.value}

    return app


configure_logging(settings.LOG_LEVEL)
app = create_app()


def run() -> None:
    import uvicorn

    uvicorn.run("src.main:app", host="0.0.0.0", port=8000, loop="uvloop")


if __name__ == "__main__":
    run()
