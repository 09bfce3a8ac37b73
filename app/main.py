import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

# Import models so every table is registered with SQLAlchemy Base
from . import models  # noqa: F401
from .config import ALLOWED_ORIGINS, ENVIRONMENT, SEED_DEMO_DATA
from .database import Base, SessionLocal, engine
from .domain.appointments import router as appointments_router
from .domain.blood_requests import router as blood_requests_router
from .domain.dashboard import router as dashboard_router
from .domain.inventory import router as inventory_router
from .domain.notifications import router as notifications_router
from .domain.users import auth_router, router as users_router
from .exceptions import BloodConnectError
from .seed import seed_demo_data

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Reduce verbosity of third-party libraries
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application starting up...")
    try:
        Base.metadata.create_all(bind=engine, checkfirst=True)
        logger.info("Database tables created successfully")
    except Exception as e:
        # Ignore "already exists" errors from race conditions between workers
        error_msg = str(e)
        if "already exists" in error_msg or "duplicate key" in error_msg:
            logger.info("Database tables already exist (created by another worker)")
        else:
            logger.error(f"Failed to create database tables: {e}")
            raise

    if SEED_DEMO_DATA:
        db = SessionLocal()
        try:
            seed_demo_data(db)
        except Exception as e:
            logger.warning(f"Demo data seeding failed: {e}")
        finally:
            db.close()

    yield
    logger.info("Application shutting down...")


app = FastAPI(title="BloodConnect API", version="1.0.0", lifespan=lifespan)


@app.exception_handler(BloodConnectError)
async def domain_exception_handler(request: Request, exc: BloodConnectError):
    """Domain errors carry their own HTTP status"""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} - {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Malformed input becomes a 400. Problems with the Authorization header
    are reported as 401 instead.
    """
    for error in exc.errors():
        if error.get("loc") and "authorization" in str(error.get("loc")).lower():
            logger.warning(
                f"Authentication failed for {request.url.path}: Missing or invalid Authorization header"
            )
            return JSONResponse(status_code=401, content={"message": "Authentication required"})

    logger.warning(f"Validation error for {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=400,
        content={
            "message": "Validation failed",
            "errors": [
                {"loc": list(error.get("loc", ())), "msg": error.get("msg"), "type": error.get("type")}
                for error in exc.errors()
            ],
        },
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"{request.method} {request.url.path} - Error: {str(exc)}")
    content = {"message": "Server error"}
    if ENVIRONMENT == "development":
        content["error"] = str(exc)
    return JSONResponse(status_code=500, content=content)


# Log CORS configuration for debugging
logger.info(f"CORS allowed origins: {ALLOWED_ORIGINS}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["*"],
)

# Routes
app.include_router(auth_router)
app.include_router(users_router)
app.include_router(inventory_router)
app.include_router(blood_requests_router)
app.include_router(appointments_router)
app.include_router(dashboard_router)
app.include_router(notifications_router)


@app.get("/")
def root():
    return {"message": "BloodConnect API is running"}


@app.get("/health")
def health():
    return {"status": "healthy"}
