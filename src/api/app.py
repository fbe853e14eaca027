"""
FastAPI application for the maternity coverage dashboard.

Provides:
- Dashboard, claim and smart contract endpoints consumed by the front-end
- Pregnancy progress and scripted assistant endpoints
- Simulated document upload
- Health check endpoints
"""

# Configure logging before importing libraries that log on import
import logging

logging.getLogger("httpcore").setLevel(logging.WARNING)
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("python_multipart").setLevel(logging.WARNING)
logging.getLogger("python_multipart.multipart").setLevel(logging.WARNING)

import time
from contextlib import asynccontextmanager
from pathlib import PurePath
from typing import List, Optional

from fastapi import Depends, FastAPI, File, Request, UploadFile, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ..assistant import AssistantReply, ChatMessage, VoiceCommand, chat_reply, respond_to_voice_command
from ..claims import (
    Claim,
    ClaimCreate,
    ClaimStatusUpdate,
    ClaimValidationError,
    CoverageError,
    NotFoundError,
    SmartContractTransaction,
)
from ..dashboard import Dashboard, PregnancyProgress, get_dashboard, pregnancy_progress
from ..storage import EntityKind, EntityStore, get_entity_store
from ..utils.config import settings
from ..workflow import ClaimService, validation_details

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info(f"Starting {settings.app_name}...")
    get_entity_store()
    yield
    logger.info(f"Shutting down {settings.app_name}...")


app = FastAPI(
    title=settings.app_name,
    description="Policy, claim and pregnancy-progress data for the maternity dashboard",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Dependencies
# =============================================================================


def get_claim_service(store: EntityStore = Depends(get_entity_store)) -> ClaimService:
    return ClaimService(store, hash_length=settings.transaction_hash_length)


# =============================================================================
# Error Handlers
# =============================================================================


@app.exception_handler(CoverageError)
async def coverage_error_handler(request: Request, exc: CoverageError):
    logger.info(f"{request.method} {request.url.path} -> {exc.status_code}: {exc}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Report body validation failures the same way as ClaimValidationError."""
    error = ClaimValidationError(validation_details(exc.errors()))
    logger.info(f"{request.method} {request.url.path} -> 400: {error}")
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=error.to_dict())


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    """Log the failure server-side; callers only see a generic message."""
    logger.error(f"{request.method} {request.url.path} failed: {exc}", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error"},
    )


# =============================================================================
# Health Check Endpoints
# =============================================================================


@app.get("/")
async def root():
    """Root endpoint - basic health check."""
    return {"service": settings.app_name, "status": "running"}


@app.get("/health")
def health_check(store: EntityStore = Depends(get_entity_store)):
    """Detailed health check endpoint."""
    return {
        "status": "healthy",
        "entities": {kind.value: store.count(kind) for kind in EntityKind},
    }


# =============================================================================
# Dashboard Endpoints
# =============================================================================


@app.get("/api/dashboard/{user_id}", response_model=Dashboard)
def read_dashboard(user_id: str, store: EntityStore = Depends(get_entity_store)):
    """User profile, policy, claims, transactions and stats in one payload."""
    return get_dashboard(store, user_id)


@app.get("/api/pregnancy/{user_id}", response_model=PregnancyProgress)
def read_pregnancy_progress(user_id: str, store: EntityStore = Depends(get_entity_store)):
    user = store.get_user(user_id)
    if user is None:
        raise NotFoundError("User", user_id)

    progress = pregnancy_progress(user.pregnancy_week)
    if progress is None:
        raise NotFoundError("Pregnancy progress", user_id)
    return progress


# =============================================================================
# Claim Endpoints
# =============================================================================


@app.get("/api/claims/{user_id}", response_model=List[Claim])
def list_claims(user_id: str, service: ClaimService = Depends(get_claim_service)):
    """Claims for a user, newest first."""
    return service.list_claims(user_id)


@app.post("/api/claims", response_model=Claim, status_code=status.HTTP_201_CREATED)
def create_claim(claim: ClaimCreate, service: ClaimService = Depends(get_claim_service)):
    """
    Submit a claim.

    Records a pending coverage transaction and adds the amount to the
    policy's coverage used. Unknown policy ids still create the claim.
    """
    return service.submit_claim(claim)


@app.patch("/api/claims/{claim_id}", response_model=Claim)
def update_claim(
    claim_id: str,
    update: ClaimStatusUpdate,
    service: ClaimService = Depends(get_claim_service),
):
    return service.update_claim_status(claim_id, update.status)


# =============================================================================
# Smart Contract Endpoints
# =============================================================================


@app.get("/api/smart-contracts/{user_id}", response_model=List[SmartContractTransaction])
def list_smart_contract_transactions(user_id: str, service: ClaimService = Depends(get_claim_service)):
    """Simulated smart contract events for a user, newest first."""
    return service.list_transactions(user_id)


# =============================================================================
# Assistant Endpoints
# =============================================================================


@app.post("/api/assistant/voice", response_model=AssistantReply)
def voice_command(command: VoiceCommand, store: EntityStore = Depends(get_entity_store)):
    """Answer a transcribed voice command using the speaker's dashboard."""
    dashboard = get_dashboard(store, command.user_id)
    return respond_to_voice_command(command.command, dashboard)


@app.post("/api/assistant/chat", response_model=AssistantReply)
def chat(message: ChatMessage):
    return chat_reply(message.message)


# =============================================================================
# Upload Endpoint
# =============================================================================


@app.post("/api/upload")
async def upload_document(file: Optional[UploadFile] = File(None)):
    """
    Simulated document upload.

    Nothing is stored; the response carries a synthetic document URL.
    """
    filename = PurePath(file.filename).name if file is not None and file.filename else "document.pdf"
    filename = filename.replace(" ", "_")
    url = f"{settings.upload_base_url.rstrip('/')}/{int(time.time() * 1000)}_{filename}"

    logger.info(f"Simulated upload: {url}")
    return {"url": url, "message": "File uploaded successfully"}


# =============================================================================
# Main Entry Point
# =============================================================================


def main():
    """Run the FastAPI server."""
    import uvicorn

    uvicorn.run(
        "src.api.app:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level="debug" if settings.debug else "info",
    )


if __name__ == "__main__":
    main()
