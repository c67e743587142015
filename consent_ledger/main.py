"""
Consent Ledger - FastAPI Application
Hosts ledger invocations over HTTP
"""

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from typing import List, Any, Optional
import json
import structlog

from pydantic import BaseModel, Field

from .config import get_ledger_config
from .constants import SERVICE_NAME, SERVICE_VERSION, ERROR_HTTP_STATUS
from .dispatch import get_ledger, ConsentLedger

# Configure structured logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger()

# Global settings
settings = get_ledger_config()


class InvokeRequest(BaseModel):
    function: str
    args: List[str] = Field(default_factory=list)


class InvokeResponse(BaseModel):
    status: str
    message: str = ""
    payload: Optional[Any] = None


class LedgerConfigOut(BaseModel):
    """Subset of ledger configuration exposed via API for admin/ops UI."""

    engine_design: str
    state_backend: str
    query_enabled: bool
    debug_mode: bool
    log_level: str


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    logger.info("Starting Consent Ledger", version=SERVICE_VERSION,
                engine_design=settings.engine_design.value)
    yield
    logger.info("Shutting down Consent Ledger")

# Create FastAPI app
app = FastAPI(
    title="Consent Ledger",
    description="Scoped consent grants, revokes and access checks over a key/value ledger",
    version=SERVICE_VERSION,
    lifespan=lifespan
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "service": SERVICE_NAME,
        "version": SERVICE_VERSION,
        "engine_design": settings.engine_design.value,
        "state_backend": settings.state_backend.value,
    }


@app.get("/ledger/config", response_model=LedgerConfigOut)
async def get_ledger_config_view():
    """Return a sanitized view of ledger configuration for admin/ops tools.

    The database URL is withheld since it may carry credentials.
    """

    return LedgerConfigOut(
        engine_design=settings.engine_design.value,
        state_backend=settings.state_backend.value,
        query_enabled=settings.query_enabled,
        debug_mode=settings.debug_mode,
        log_level=settings.log_level,
    )


@app.post("/invoke", response_model=InvokeResponse)
async def invoke(request: InvokeRequest):
    """Invoke a ledger function with positional string arguments"""
    ledger: ConsentLedger = get_ledger()
    response = ledger.invoke(request.function, request.args)

    if not response.ok:
        status_code = ERROR_HTTP_STATUS.get(response.error_code, 500)
        logger.warning("Ledger invocation rejected", function=request.function,
                       error_code=response.error_code, status_code=status_code)
        raise HTTPException(
            status_code=status_code,
            detail={"error": response.error_code, "message": response.message},
        )

    payload = json.loads(response.payload) if response.payload else None
    return InvokeResponse(status="success", message=response.message, payload=payload)


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "message": "Consent Ledger",
        "version": SERVICE_VERSION,
        "status": "operational",
    }

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
