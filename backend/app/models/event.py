"""
event.py — ORM Model for Events

Purpose:
- Represent an event created and owned by a user.
- The event lifecycle itself lives outside the user service; here the table
  is only read through the user → events association (owner_id).
"""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from app.core.database import Base
from app.models.user import utcnow


class Event(Base):
    __tablename__ = "events"

    id = Column(Integer, primary_key=True, index=True)

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    location = Column(String(255), nullable=True)
    starts_at = Column(DateTime, nullable=True)

    # Foreign Key → owning user
    owner_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    created_at = Column(DateTime, nullable=False, default=utcnow)

    owner = relationship("User", back_populates="events")

    def __repr__(self):
        return f"<Event {self.title} | owner {self.owner_id}>"
