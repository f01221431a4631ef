import secrets
from typing import Optional
from fastapi import Depends, Header, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.config import settings
from app.core.database import get_db
from app.core.security import decode_access_token
from app.models.user import User
from app.services import user_service
from app.services.reminder_service import ReminderContext

bearer_scheme = HTTPBearer(auto_error=False)

async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db)
) -> User:
    unauthorized = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    if credentials is None:
        raise unauthorized

    sub = decode_access_token(credentials.credentials)
    try:
        user_id = int(sub)
    except (TypeError, ValueError):
        raise unauthorized

    user = await user_service.get_user(db, user_id)
    if user is None or not user.is_active:
        raise unauthorized
    return user

def verify_cron_secret(x_cron_secret: Optional[str] = Header(None)) -> None:
    """Guards the sweep trigger when REMINDER_CRON_SECRET is configured."""
    expected = settings.REMINDER_CRON_SECRET
    if not expected:
        return
    if x_cron_secret is None or not secrets.compare_digest(x_cron_secret.encode(), expected.encode()):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid cron secret",
        )

def get_reminder_context(request: Request) -> ReminderContext:
    """The sweep dependencies built in the app lifespan."""
    return request.app.state.reminder_context
