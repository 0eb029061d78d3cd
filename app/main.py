from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.api.v1.api import api_router
from app.core.exceptions import DomainError
from app.db.database import Base, engine
from app.utils.clock import utcnow
from app.utils.logger import logger

# register tables on Base.metadata
from app.models import event_models, event_registration_models, project_models, user_models  # noqa: F401


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Create all tables (alembic owns real migrations)
    Base.metadata.create_all(bind=engine)
    logger.info("Campus Connect API started")
    yield


app = FastAPI(title="Campus Connect API", lifespan=lifespan)


def error_body(request: Request, status_code: int, error: str, message: str) -> dict:
    return {
        "status": status_code,
        "error": error,
        "message": message,
        "path": request.url.path,
        "timestamp": utcnow().isoformat(),
    }


@app.exception_handler(DomainError)
async def domain_error_handler(request: Request, exc: DomainError):
    headers = None
    if exc.status_code == status.HTTP_401_UNAUTHORIZED:
        headers = {"WWW-Authenticate": "Bearer"}
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(request, exc.status_code, exc.error, exc.message),
        headers=headers,
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    validation_errors = {}
    for err in exc.errors():
        field = ".".join(str(part) for part in err["loc"] if part not in ("body", "query", "path"))
        validation_errors.setdefault(field or "request", err["msg"])

    body = error_body(request, status.HTTP_400_BAD_REQUEST, "Validation Failed", "Invalid input parameters")
    body["validation_errors"] = validation_errors
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=body)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body(
            request,
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Internal Server Error",
            "An unexpected error occurred",
        ),
    )


@app.get("/")
def read_root():
    return {"message": "Welcome to the Campus Connect API!"}


app.include_router(api_router, prefix="/api/v1")
