import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from adgen.config import settings
from adgen.routers import projects, health
from adgen.domain.errors import (
    AuthenticationError,
    ConflictError,
    DomainError,
    InsufficientCreditsError,
    NotFoundError,
    ValidationError,
)
from adgen.application.event_handlers import register_event_handlers

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Adgen API",
    description="Product photo to marketing image generation with credit metering",
    version=settings.VERSION,
)

# Configure logging and register domain event handlers on startup
@app.on_event("startup")
async def startup_event():
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    register_event_handlers()
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Allows all origins
    allow_credentials=True,
    allow_methods=["*"],  # Allows all methods
    allow_headers=["*"],  # Allows all headers
)


def _message(status_code: int, exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"message": str(exc)})


# Domain error handlers
@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    return _message(400, exc)


@app.exception_handler(AuthenticationError)
async def authentication_error_handler(request: Request, exc: AuthenticationError):
    return _message(401, exc)


@app.exception_handler(InsufficientCreditsError)
async def insufficient_credits_handler(request: Request, exc: InsufficientCreditsError):
    return _message(401, exc)


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return _message(404, exc)


@app.exception_handler(ConflictError)
async def conflict_error_handler(request: Request, exc: ConflictError):
    return _message(409, exc)


# Generation failures arrive here already compensated and reported
@app.exception_handler(DomainError)
async def domain_error_handler(request: Request, exc: DomainError):
    return _message(500, exc)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    detail = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
    return JSONResponse(status_code=400, content={"message": detail})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return _message(500, exc)

# Include routers
app.include_router(health.router, tags=["Health"])  # Health check endpoints first
app.include_router(projects.router, tags=["Projects"])

# Local asset store is served by the API itself
if settings.STORAGE_TYPE.lower() == "filesystem":
    app.mount("/assets", StaticFiles(directory=settings.ASSET_STORAGE_DIR, check_dir=False), name="assets")

@app.get("/")
async def root():
    return {"message": "Welcome to Adgen API. See /docs for API documentation"}
