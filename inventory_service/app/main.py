import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shared.core.config import settings
from shared.core.database import Base, engine
from shared.exception_handler import setup_exception_handlers
from shared.models import organizations, users

from .models import change_logs, field_aliases, inventory, skus, transactions
from .router import (change_logs_router, field_aliases_router, inventory_router, skus_router,
                     transactions_router, users_router)

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(title="Inventory Service API")

# Create all tables
Base.metadata.create_all(bind=engine)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

setup_exception_handlers(app)

# Include routers
app.include_router(skus_router.router)
app.include_router(inventory_router.router)
app.include_router(transactions_router.router)
app.include_router(users_router.router)
app.include_router(change_logs_router.router)
app.include_router(field_aliases_router.router)


@app.get("/health")
def health_check():
    return {"status": "ok", "service": "inventory"}
