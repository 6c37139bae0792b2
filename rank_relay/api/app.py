"""
FastAPI application for the rank relay.

Defines all API routes and request handling.

Author: Blessing Ajala - Software Engineer
GitHub: https://github.com/Oyelamin
LinkedIn: https://www.linkedin.com/in/blessphp/
Twitter: @Blessin06147308
"""

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, Optional

from fastapi import Depends, FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from pydantic import ValidationError
from starlette.concurrency import run_in_threadpool
from starlette.exceptions import HTTPException as StarletteHTTPException

from rank_relay.config import settings
from rank_relay.core.relay import RankRelay
from rank_relay.utils.exceptions import (
    DataUnavailableError,
    QueryProcessingError,
    QueryValidationError,
    RankRelayError,
)
from rank_relay.utils.logger import logger
from rank_relay.api.schemas import (
    DataUnavailableResponse,
    HealthResponse,
    NotFoundResponse,
    ProcessingErrorResponse,
    QueryRequest,
    QueryResponse,
    RootResponse,
    ValidationErrorResponse,
)

# Singleton relay instance
_relay: Optional[RankRelay] = None


def get_relay() -> RankRelay:
    """Get or create the relay singleton."""
    global _relay
    if _relay is None:
        _relay = RankRelay()
    return _relay


def utc_timestamp() -> str:
    """Current time as an ISO 8601 string in UTC."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager for startup/shutdown."""
    logger.info("Starting Rank Relay API...")

    if not settings.sheet.sheet_id:
        logger.warning("SHEET_ID is not set. /query will report data as unavailable.")
    if not settings.assistant.api_key:
        logger.warning("OPENAI_API_KEY is not set. /query will fail to reach the assistant.")

    logger.info(f"API ready on port {settings.server.port}")
    logger.info("Endpoints: GET / (health check), GET /health, POST /query (main endpoint)")
    yield

    logger.info("Shutting down API...")


# Create FastAPI app
app = FastAPI(
    title=settings.api.title,
    version=settings.api.version,
    description=settings.api.description,
    lifespan=lifespan
)


# Configure CORS
allowed_origins = settings.api.allowed_origins
if not allowed_origins:
    allowed_origins = ["*"]

CORS_METHODS = ["GET", "POST", "OPTIONS"]
CORS_HEADERS = ["Content-Type", "Authorization"]

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=False,
    allow_methods=CORS_METHODS,
    allow_headers=CORS_HEADERS,
)


def options_headers(origin: Optional[str]) -> dict:
    """CORS headers attached to the bare OPTIONS response."""
    headers = {
        "Access-Control-Allow-Methods": ", ".join(CORS_METHODS),
        "Access-Control-Allow-Headers": ", ".join(CORS_HEADERS),
    }
    if "*" in allowed_origins:
        headers["Access-Control-Allow-Origin"] = "*"
    elif origin in allowed_origins:
        headers["Access-Control-Allow-Origin"] = origin
        headers["Vary"] = "Origin"
    return headers


# Registered after CORSMiddleware so it is the outermost layer and sees every OPTIONS first
@app.middleware("http")
async def short_circuit_options(request: Request, call_next):
    """Answer any OPTIONS request with a bare 200."""
    if request.method == "OPTIONS":
        return Response(status_code=200, headers=options_headers(request.headers.get("origin")))
    return await call_next(request)


# --- Exception Handlers ---

@app.exception_handler(QueryValidationError)
async def handle_validation_error(request: Request, error: QueryValidationError) -> JSONResponse:
    """Invalid query body -> 400."""
    logger.info(f"Rejected query: {error.details or error.message}")
    return JSONResponse(status_code=400, content=ValidationErrorResponse().model_dump())


@app.exception_handler(DataUnavailableError)
async def handle_data_unavailable(request: Request, error: DataUnavailableError) -> JSONResponse:
    """Rank data could not be loaded -> 500."""
    logger.error(f"Error fetching Google Sheets data: {error.message} ({error.details})")
    body = DataUnavailableResponse(
        message="Could not fetch rank data from Google Sheets. Please try again later."
    )
    return JSONResponse(status_code=500, content=body.model_dump())


@app.exception_handler(QueryProcessingError)
async def handle_processing_error(request: Request, error: QueryProcessingError) -> JSONResponse:
    """Assistant failed to answer -> 500."""
    logger.error(f"Error processing query: {error.message} ({error.details})")
    body = ProcessingErrorResponse(message=error.message, timestamp=utc_timestamp())
    return JSONResponse(status_code=500, content=body.model_dump())


@app.exception_handler(StarletteHTTPException)
async def handle_http_error(request: Request, error: StarletteHTTPException):
    """Unknown routes and methods -> 404 with the route echoed back."""
    if error.status_code in (404, 405):
        body = NotFoundResponse(
            message=f"Route {request.method} {request.url.path} does not exist"
        )
        return JSONResponse(status_code=404, content=body.model_dump(by_alias=True))
    return await http_exception_handler(request, error)


# --- Helpers ---

async def parse_query_request(request: Request) -> QueryRequest:
    """
    Read and validate the JSON body of a query request.

    Raises:
        QueryValidationError: If the body is not JSON or the query is missing/blank
    """
    try:
        payload: Any = await request.json()
    except ValueError as e:
        raise QueryValidationError("Request body is not valid JSON", details=str(e))

    if not isinstance(payload, dict):
        raise QueryValidationError("Request body must be a JSON object")

    try:
        return QueryRequest.model_validate(payload)
    except ValidationError as e:
        raise QueryValidationError("Invalid query", details=str(e))


# --- Routes ---

@app.get("/", response_model=RootResponse, tags=["General"])
async def root():
    """Root endpoint with API information."""
    return RootResponse(
        message="Chatbot Backend API is running",
        endpoints={
            "health": "GET / - Check API status",
            "query": 'POST /query - Send a query with rank data (body: { "query": "your question" })',
        },
        version=settings.api.version
    )


@app.get("/health", response_model=HealthResponse, tags=["General"])
async def health():
    """Health check endpoint."""
    return HealthResponse(status="healthy", timestamp=utc_timestamp())


@app.post("/query", response_model=QueryResponse, tags=["Query"])
async def query(request: Request, relay: RankRelay = Depends(get_relay)):
    """
    Answer a question about the current rank data.

    Fetches the rank sheet, sends it with the question to the assistant
    and returns its answer.
    """
    query_request = await parse_query_request(request)
    logger.info(f"Received query: {query_request.query}")

    try:
        result = await run_in_threadpool(relay.answer, query_request.query)
    except RankRelayError:
        raise
    except Exception as e:
        logger.error(f"Query failed: {e}", exc_info=True)
        raise QueryProcessingError("An unexpected error occurred", details=str(e))

    return QueryResponse(success=True, answer=result["answer"], timestamp=utc_timestamp())
