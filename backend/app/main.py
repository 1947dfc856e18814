import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import PlainTextResponse, Response
from dotenv import load_dotenv
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

# Load environment variables
load_dotenv()

from app.api.deps import limiter
from app.api.routes import assistants, chat, history, knowledge_base
from app.core.config import settings as app_settings
from app.core.errors import WorkspaceError

logging.basicConfig(
    level=app_settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Assistant Workspace API",
    version="1.0.0",
    description="Filesystem-backed assistants, knowledge bases and chat history",
)

# Attach limiter to app state
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

CORS_HEADERS = {
    "Access-Control-Allow-Methods": "POST, OPTIONS, DELETE, PUT, GET",
    "Access-Control-Allow-Headers": "Content-Type",
}


def _allow_origin(request: Request) -> str:
    origins = app_settings.cors_origins
    if not origins or "*" in origins:
        return "*"
    origin = request.headers.get("origin")
    return origin if origin in origins else origins[0]


@app.middleware("http")
async def cors_headers(request: Request, call_next):
    """Stamp CORS headers on every response and answer any preflight with 204."""
    if request.method == "OPTIONS":
        response = Response(status_code=204)
    else:
        response = await call_next(request)

    response.headers["Access-Control-Allow-Origin"] = _allow_origin(request)
    response.headers.update(CORS_HEADERS)
    return response


@app.exception_handler(WorkspaceError)
async def workspace_error_handler(request: Request, exc: WorkspaceError):
    return PlainTextResponse(exc.message, status_code=exc.status_code)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    logger.info("Rejected %s %s: %s", request.method, request.url.path, exc.errors())
    return PlainTextResponse("Bad request", status_code=400)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return PlainTextResponse(str(exc.detail), status_code=exc.status_code, headers=exc.headers)


# Include routers
app.include_router(chat.router)
app.include_router(assistants.router)
app.include_router(knowledge_base.router)
app.include_router(history.router)


@app.get("/")
async def root():
    return {
        "name": "Assistant Workspace API",
        "version": "1.0.0",
        "docs": "/docs"
    }


@app.get("/health")
async def health():
    return {"status": "healthy"}


def run():
    """Serve the app with uvicorn on the configured port."""
    import uvicorn

    uvicorn.run("app.main:app", host="0.0.0.0", port=app_settings.backend_port)
