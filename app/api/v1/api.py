from fastapi import APIRouter
from app.api.v1.endpoints import tasks, users, reminders

api_router = APIRouter()
api_router.include_router(tasks.router, prefix="/tasks", tags=["tasks"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(reminders.router, tags=["reminders"])
