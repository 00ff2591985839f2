from contextlib import asynccontextmanager
import logging
import uuid

import stripe
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.core.config import settings
from app.core.firebase import init_firebase
from app.core.database import engine, Base, SessionLocal
from app.core.exceptions import FitClassError
from app.api.v1.router import api_router
from app.db.seed import seed_all

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

__version__ = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("startup: Entry")
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        seed_all(session)
    finally:
        session.close()
    logger.info("startup: Success")
    yield


# Initialize Firebase
init_firebase()

app = FastAPI(
    title=settings.project_name,
    version=__version__,
    debug=settings.debug,
    redirect_slashes=False,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(FitClassError)
async def fitclass_error_handler(request: Request, exc: FitClassError):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.error_code, "message": exc.message},
    )


@app.exception_handler(stripe.StripeError)
async def stripe_error_handler(request: Request, exc: stripe.StripeError):
    reference = str(uuid.uuid4())
    logger.error(
        f"stripe_error_handler: {request.method} {request.url.path} - reference: {reference} - {exc}")
    return JSONResponse(
        status_code=status.HTTP_502_BAD_GATEWAY,
        content={
            "error": "payment_provider_error",
            "message": "The payment provider could not complete the request",
            "reference": reference,
        },
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    reference = str(uuid.uuid4())
    logger.error(
        f"unhandled_error_handler: {request.method} {request.url.path} - reference: {reference}",
        exc_info=exc,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "internal_error",
            "message": "An unexpected error occurred",
            "reference": reference,
        },
    )


# Include routers
app.include_router(api_router, prefix=settings.api_v1_str)


@app.get("/health")
async def health_check():
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
