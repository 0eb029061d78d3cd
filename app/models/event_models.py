from sqlalchemy import (
    Column,
    Integer,
    String,
    DateTime,
    Date,
    Time,
    Boolean,
    Text,
    ForeignKey,
    JSON,
    CheckConstraint,
    Index,
)

from app.db.database import Base
from app.utils.clock import utcnow


class Event(Base):
    __tablename__ = "events"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    long_description = Column(Text, nullable=True)
    category = Column(String(50), nullable=False)

    event_date = Column(Date, nullable=False)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    location = Column(String(255), nullable=False)

    max_attendees = Column(Integer, nullable=False, default=100)
    # only ever changed by app.crud.event increment/decrement
    current_attendees = Column(Integer, nullable=False, default=0)

    organizer_id = Column(Integer, ForeignKey("users.id"), nullable=False)

    requirements = Column(Text, nullable=True)
    tags = Column(JSON, nullable=True)
    is_featured = Column(Boolean, nullable=False, default=False)
    is_active = Column(Boolean, nullable=False, default=True)
    registration_deadline = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    __table_args__ = (
        CheckConstraint("max_attendees > 0", name="ck_events_max_attendees_positive"),
        CheckConstraint("current_attendees >= 0", name="ck_events_current_attendees_non_negative"),
        CheckConstraint(
            "current_attendees <= max_attendees",
            name="ck_events_current_attendees_lte_max",
        ),
        Index("ix_events_event_date", "event_date"),
        Index("ix_events_category", "category"),
        Index("ix_events_organizer_id", "organizer_id"),
        Index("ix_events_is_featured", "is_featured"),
    )

    @property
    def is_full(self) -> bool:
        return self.current_attendees >= self.max_attendees

    @property
    def available_spots(self) -> int:
        return self.max_attendees - self.current_attendees
