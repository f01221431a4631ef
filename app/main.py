import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from app.api.v1.api import api_router
from app.core.config import settings
from app.core.database import AsyncSessionLocal
from app.core.whatsapp import FonnteClient
from app.services.reminder_service import ReminderContext
from app.services.reminder_store import TaskReminderStore
from app.services.scheduler import start_scheduler, shutdown_scheduler

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    gateway = FonnteClient.from_settings(settings)
    app.state.reminder_context = ReminderContext(
        store=TaskReminderStore(AsyncSessionLocal),
        gateway=gateway,
    )
    if settings.REMINDER_SCHEDULER_ENABLED:
        start_scheduler(app.state.reminder_context)
    try:
        yield
    finally:
        shutdown_scheduler()
        await gateway.aclose()


app = FastAPI(title=settings.PROJECT_NAME, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.BACKEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix=settings.API_V1_STR)


@app.get("/")
async def root():
    return {"status": "ok", "service": settings.PROJECT_NAME}
