from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from app.models.user import User
from app.schemas.user import UserCreate
from app.core.security import get_password_hash, verify_password

async def create_user(db: AsyncSession, user_in: UserCreate):
    db_user = User(
        name=user_in.name,
        email=user_in.email.lower().strip(),
        phone_number=user_in.phone_number,
        hashed_password=get_password_hash(user_in.password)
    )
    db.add(db_user)
    await db.commit()
    await db.refresh(db_user)
    return db_user

async def get_user(db: AsyncSession, user_id: int):
    result = await db.execute(select(User).filter(User.id == user_id))
    return result.scalars().first()

async def get_user_by_email(db: AsyncSession, email: str):
    result = await db.execute(select(User).filter(User.email == email.lower().strip()))
    return result.scalars().first()

async def authenticate(db: AsyncSession, email: str, password: str):
    user = await get_user_by_email(db, email)
    if not user or not user.is_active:
        return None
    if not verify_password(password, user.hashed_password):
        return None
    return user

async def update_user_profile(db: AsyncSession, user_id: int, user_update: dict):
    db_user = await get_user(db, user_id)
    if db_user:
        for key, value in user_update.items():
            if hasattr(db_user, key):
                setattr(db_user, key, value)
        await db.commit()
        await db.refresh(db_user)
    return db_user
