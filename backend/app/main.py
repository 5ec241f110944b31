from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from core.config import settings
from core.exceptions import register_exception_handlers
from app.startup import configure_startup_logging, run_startup_checks

# ========== Orders ==========
from modules.orders.routes.split_bill_routes import router as split_bill_router

configure_startup_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    run_startup_checks()
    yield


app = FastAPI(
    title="Split Bill Engine",
    description="""
    Splits an open table order into several orders, either into equal
    portions or by percentage shares, and closes the original order.
    """,
    version="1.0.0",
    debug=settings.debug,
    lifespan=lifespan,
)

# Register exception handlers for consistent error responses
register_exception_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.is_development else [],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(split_bill_router)


@app.get("/health")
def health_check():
    return {"status": "ok", "environment": settings.environment}
