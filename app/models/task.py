from sqlalchemy import Column, Integer, String, Boolean, DateTime, BigInteger, ForeignKey
from sqlalchemy.orm import relationship
from app.core.database import Base
from app.utils.timezone import utc_now

class Task(Base):
    __tablename__ = "tasks"

    id = Column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    title = Column(String, nullable=False)
    description = Column(String, nullable=True)
    deadline = Column(DateTime(timezone=True), nullable=False) # always UTC
    priority = Column(String, default="medium", nullable=False) # high | medium | low
    status = Column(String, default="pending", index=True, nullable=False) # pending | done

    remind_h1 = Column(Boolean, default=False, nullable=False)
    remind_h0 = Column(Boolean, default=False, nullable=False)
    remind_h5h = Column(Boolean, default=False, nullable=False)

    # Set by the reminder sweep once a category was delivered for the current deadline
    reminded_h1_at = Column(DateTime(timezone=True), nullable=True)
    reminded_h0_at = Column(DateTime(timezone=True), nullable=True)
    reminded_h5h_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), default=utc_now)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now)

    owner = relationship("User", back_populates="tasks")
