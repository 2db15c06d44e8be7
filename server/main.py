# server/main.py

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from api import analytics, auth
from core.config import CORS_ORIGINS
from core.exceptions import ClientInputError, DashboardError, DependencyError
from core.logging import get_logger
from database import init_db


logger = get_logger("dashboard_api")

init_db()

app = FastAPI(title="Analytics Dashboard API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)


# -------------------------------
# Exception handlers
# -------------------------------

@app.exception_handler(DashboardError)
async def dashboard_error_handler(request: Request, exc: DashboardError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    fields = sorted({str(err["loc"][-1]) for err in exc.errors()})
    error = ClientInputError(f"Missing or invalid fields: {', '.join(fields)}.")
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


@app.exception_handler(SQLAlchemyError)
async def store_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error("Unhandled store error on %s", request.url.path, exc_info=exc)
    error = DependencyError()
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


app.include_router(auth.router)
app.include_router(analytics.router)


@app.get("/health")
def health():
    return {"status": "ok"}
