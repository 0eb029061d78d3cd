# Event store
from datetime import date

from sqlalchemy import func, or_, update
from sqlalchemy.orm import Session

from app.models.event_models import Event
from app.models.event_registration_models import EventRegistration


def find_active_by_id(db: Session, event_id: int) -> Event | None:
    return db.query(Event).filter(Event.id == event_id, Event.is_active.is_(True)).first()


def query_active(db: Session):
    return db.query(Event).filter(Event.is_active.is_(True))


def by_category(db: Session, category: str):
    return query_active(db).filter(Event.category == category)


def featured(db: Session):
    return query_active(db).filter(Event.is_featured.is_(True))


def search(db: Session, term: str):
    pattern = f"%{term.strip().lower()}%"
    return query_active(db).filter(
        or_(
            func.lower(Event.title).like(pattern),
            func.lower(Event.description).like(pattern),
        )
    )


def upcoming(db: Session, today: date):
    return query_active(db).filter(Event.event_date >= today)


def registered_by_user(db: Session, user_id: int):
    return (
        query_active(db)
        .join(EventRegistration, EventRegistration.event_id == Event.id)
        .filter(EventRegistration.user_id == user_id)
    )


def distinct_categories(db: Session) -> list[str]:
    rows = (
        db.query(Event.category)
        .filter(Event.is_active.is_(True))
        .distinct()
        .order_by(Event.category)
        .all()
    )
    return [row[0] for row in rows]


def increment_attendee_count(db: Session, event_id: int) -> bool:
    """Conditionally take one seat. Returns False when the event is already full."""
    result = db.execute(
        update(Event)
        .where(Event.id == event_id, Event.current_attendees < Event.max_attendees)
        .values(current_attendees=Event.current_attendees + 1)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1


def decrement_attendee_count(db: Session, event_id: int) -> bool:
    """Release one seat, never going below zero."""
    result = db.execute(
        update(Event)
        .where(Event.id == event_id, Event.current_attendees > 0)
        .values(current_attendees=Event.current_attendees - 1)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1
