import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.errors import register_exception_handlers
from app.api.routes.auth import router as auth_router
from app.api.routes.bills import router as bills_router
from app.api.routes.expenses import router as expenses_router
from app.api.routes.inventory import router as inventory_router
from app.api.routes.pos import router as pos_router
from app.api.routes.purchases import router as purchases_router
from app.api.routes.reports import router as reports_router
from app.api.routes.users import router as users_router
from app.core.config import settings
from app.db.database import SessionLocal
from app.services.provisioning import ensure_founder

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    db = SessionLocal()
    try:
        ensure_founder(db)
    finally:
        db.close()
    logger.info("%s started", settings.app_name)
    yield


app = FastAPI(title=settings.app_name, lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
register_exception_handlers(app)

app.include_router(auth_router)
app.include_router(users_router)
app.include_router(inventory_router)
app.include_router(purchases_router)
app.include_router(pos_router)
app.include_router(bills_router)
app.include_router(expenses_router)
app.include_router(reports_router)


@app.get("/health", tags=["System"])
def health_check():
    return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}
