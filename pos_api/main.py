# Main application file



import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from pos_api.database import Base, build_engine, build_session_factory
from pos_api.core.config import settings
from pos_api.core.errors import PosError
from pos_api.core.rate_limiter import limiter
from pos_api.models import registry  # noqa: F401  (registers tables)
from pos_api.seed import seed_demo_data
from pos_api.routers import (
    auth,
    categories,
    products,
    customers,
    sales,
    reports,
)


# LOGGING CONFIGURATION

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)s | %(message)s",
)

logger = logging.getLogger("pos_api")


# STORE LIFECYCLE
# Opened once at startup, handed to requests through app.state,
# disposed at shutdown.

@asynccontextmanager
async def lifespan(app: FastAPI):
    engine = build_engine(settings.DATABASE_URL)
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)

    if settings.AUTO_CREATE_TABLES:
        Base.metadata.create_all(bind=engine)

    if settings.SEED_DEMO_DATA:
        with app.state.session_factory() as db:
            seed_demo_data(db)

    logger.info(f"Store ready ({engine.url.get_backend_name()})")

    yield

    engine.dispose()
    logger.info("Store closed")


# APP INIT

app = FastAPI(
    title="Point of Sale API",
    description="Catalog, customers and sales backend for a single shop",
    version="1.0.0",
    lifespan=lifespan,
)



# CORS (Token-based auth)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.FRONTEND_URL],
    allow_credentials=False,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["Authorization", "Content-Type"],
)


# RATE LIMITING

app.state.limiter = limiter
app.add_exception_handler(
    RateLimitExceeded,
    _rate_limit_exceeded_handler
)


# DOMAIN ERRORS

@app.exception_handler(PosError)
async def pos_error_handler(request: Request, exc: PosError):
    if exc.status_code >= 500:
        # Details stay in the log
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": "Internal server error", "error": exc.kind},
        )

    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "error": exc.kind, **exc.context()},
    )


# REQUEST LOGGING MIDDLEWARE

@app.middleware("http")
async def log_requests(request: Request, call_next):
    start_time = time.time()

    response = await call_next(request)

    duration = round((time.time() - start_time) * 1000, 2)

    logger.info(
        f"{request.method} {request.url.path} "
        f"Status: {response.status_code} "
        f"Time: {duration}ms"
    )

    return response


# ROUTERS

app.include_router(auth.router)
app.include_router(categories.router)
app.include_router(products.router)
app.include_router(customers.router)
app.include_router(sales.router)
app.include_router(reports.router)



# ROOT

@app.get("/")
def root():
    logger.info("Health check endpoint called")
    return {"message": "Point of Sale API is running"}
