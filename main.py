import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from core.config import settings
from core.errors import ComputationError, NotFoundError, ValidationError
from core.firebase import initialize_firebase
from api.v1 import advisor, balance, bills, calendar, income

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    initialize_firebase()
    yield


app = FastAPI(title="Pulse", lifespan=lifespan)

# Налаштування CORS (щоб фронтенд мав доступ)
origins = [o.strip() for o in settings.FRONTEND_ORIGIN.split(",") if o.strip()] or [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# --- ПЕРЕКЛАД ПОМИЛОК СЕРВІСНОГО ШАРУ В HTTP ---
@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": exc.message})


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    errors = [
        {"loc": list(err.get("loc", [])), "msg": err.get("msg", "")}
        for err in exc.errors()
    ]
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": errors})


@app.exception_handler(NotFoundError)
async def not_found_error_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": exc.message})


@app.exception_handler(ComputationError)
async def computation_error_handler(request: Request, exc: ComputationError):
    logger.error(f"Computation error on {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Something went wrong while processing your request."},
    )


# --- ПІДКЛЮЧЕННЯ РОУТЕРІВ ---
app.include_router(income.router, prefix="/api/v1/income", tags=["Income"])
app.include_router(bills.router, prefix="/api/v1/bills", tags=["Bills"])
app.include_router(balance.router, prefix="/api/v1", tags=["Balance"])
app.include_router(advisor.router, prefix="/api/v1", tags=["Advisor"])
app.include_router(calendar.router, prefix="/api/v1", tags=["Calendar"])


@app.get("/")
def read_root():
    return {"status": "ok", "version": "1.0.0"}
