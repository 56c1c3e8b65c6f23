# copilot/main.py
import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from copilot.api.v1.endpoints import (
    chat,
    conversations,
    customers,
    itineraries,
    offline,
    preferences,
    templates,
)
from copilot.conversation.llm_gateway import LLMGatewayError
from copilot.core.config import settings, validate_required_settings
from copilot.db.local_store import close_offline_layer, get_connectivity_monitor, init_offline_layer
from copilot.infrastructure.connectivity import ConnectivityMonitor
from copilot.infrastructure.storage import StorageError
from services.exceptions import (
    BackendServiceError,
    BackendTimeoutError,
    NotFoundError,
    OfflineError,
    TemplateNotFoundError,
    ValidationFailedError,
)

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


# ============================================================
# LIFESPAN
# ============================================================
@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.ENVIRONMENT != "development":
        # Missing secrets are fatal outside development
        validate_required_settings()
    await init_offline_layer()
    logger.info("🚀 Application startup complete")
    yield
    await close_offline_layer()


# ============================================================
# FASTAPI APP SETUP
# ============================================================
app = FastAPI(
    title=settings.PROJECT_NAME,
    description="""
    **Travel Agent Copilot API**

    * 💬 Chat with the travel copilot for itinerary recommendations
    * 👥 Customer roster and saved itineraries
    * 📨 Email / WhatsApp message templates
    * 📴 Offline mode: reads fall back to a 24h local cache
    """,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    lifespan=lifespan,
)

# ============================================================
# CORS CONFIG
# ============================================================
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.BACKEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============================================================
# ERROR MAPPING
# ============================================================
def _error(status_code: int, detail: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"detail": detail})


@app.exception_handler(OfflineError)
async def offline_error_handler(request: Request, exc: OfflineError):
    return _error(503, str(exc))


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return _error(404, str(exc))


@app.exception_handler(TemplateNotFoundError)
async def template_not_found_handler(request: Request, exc: TemplateNotFoundError):
    return _error(404, str(exc))


@app.exception_handler(ValidationFailedError)
async def validation_failed_handler(request: Request, exc: ValidationFailedError):
    return _error(422, str(exc))


@app.exception_handler(BackendServiceError)
async def backend_error_handler(request: Request, exc: BackendServiceError):
    logger.error(f"Backend error on {request.method} {request.url.path}: {exc}")
    status_code = 504 if isinstance(exc, BackendTimeoutError) else 502
    return _error(status_code, "Backend service unavailable")


@app.exception_handler(LLMGatewayError)
async def llm_gateway_error_handler(request: Request, exc: LLMGatewayError):
    return _error(exc.status_code, exc.public_message)


@app.exception_handler(StorageError)
async def storage_error_handler(request: Request, exc: StorageError):
    logger.error(f"Local storage error: {exc}")
    return _error(503, "Local storage unavailable")


# ============================================================
# API ROUTERS
# ============================================================
app.include_router(offline.router, prefix=f"{settings.API_V1_STR}/offline", tags=["offline"])
app.include_router(customers.router, prefix=f"{settings.API_V1_STR}/customers", tags=["customers"])
app.include_router(itineraries.router, prefix=f"{settings.API_V1_STR}/itineraries", tags=["itineraries"])
app.include_router(conversations.router, prefix=f"{settings.API_V1_STR}/conversations", tags=["conversations"])
app.include_router(chat.router, prefix=f"{settings.API_V1_STR}/chat", tags=["chat"])
app.include_router(templates.router, prefix=f"{settings.API_V1_STR}/templates", tags=["templates"])
app.include_router(preferences.router, prefix=f"{settings.API_V1_STR}/preferences", tags=["preferences"])


@app.get(f"{settings.API_V1_STR}/health")
def health_check(monitor: ConnectivityMonitor = Depends(get_connectivity_monitor)):
    return {
        "status": "healthy",
        "service": settings.PROJECT_NAME,
        "offline": monitor.is_offline,
    }


# ============================================================
# ROOT ENDPOINT
# ============================================================
@app.get("/")
def read_root():
    return {"message": f"Welcome to the {settings.PROJECT_NAME} API"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("copilot.main:app", host="0.0.0.0", port=8000, reload=settings.DEBUG)
