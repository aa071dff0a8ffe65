import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlmodel import SQLModel

import models  # noqa: F401  Ensure every table is known by SQLModel for table creation
from api.admin_office_routes import router as admin_office_router
from api.attendance_routes import router as attendance_router
from api.office_routes import router as office_router
from core.config import DEV_DOMAIN, LOG_LEVEL, PRODUCTION_DOMAIN
from core.errors import AttendanceError, StorageError, Unauthenticated
from db.session import engine

# This file is the control center of the whole application

# Configure logging
logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

logger = logging.getLogger(__name__)

# Construct the list of allowed origins, always including both dev and production
allowed_origins_list = [
    DEV_DOMAIN,
    PRODUCTION_DOMAIN,
    "http://localhost:3000",  # Additional fallback for React dev
    "http://127.0.0.1:5173",  # Additional fallback for Vite dev
]

# Remove any None values and duplicates
allowed_origins_list = list(set(origin for origin in allowed_origins_list if origin))

logger.info("CORS: Allowing origins: %s", allowed_origins_list)


# When We Start, Create the DB Tables if they don't exist
@asynccontextmanager
async def lifespan(app: FastAPI):
    SQLModel.metadata.create_all(engine)
    yield


# Starts Fast API Up; Init
app = FastAPI(title="Employee Attendance Tracking API", lifespan=lifespan)

# Allow requests from the web client in dev & production
app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(AttendanceError)
async def attendance_error_handler(request: Request, exc: AttendanceError):
    if isinstance(exc, StorageError):
        # Cause already logged where it was raised; keep the response generic
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": StorageError.default_message, "code": exc.code},
        )

    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, Unauthenticated) else None
    return JSONResponse(
        status_code=exc.status_code,
        content=jsonable_encoder(exc.to_dict()),
        headers=headers,
    )


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "detail": "Missing or malformed fields",
            "code": "ValidationError",
            "errors": jsonable_encoder(exc.errors()),
        },
    )


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Server error", "code": "InternalError"},
    )


@app.get("/")
def root():
    return {
        "message": "Welcome to the Employee Attendance Tracking API",
        "endpoints": {
            "attendance": "/attendance",
            "officeLocation": "/office-locations",
            "adminOfficeLocation": "/admin/office-locations",
        },
    }


# Connects Routers to main app
app.include_router(attendance_router, prefix="/attendance", tags=["Attendance"])
app.include_router(office_router, prefix="/office-locations", tags=["Office Locations"])
app.include_router(admin_office_router, prefix="/admin/office-locations", tags=["Admin", "Office Locations"])
