# Registration store
from sqlalchemy.orm import Session

from app.models.event_registration_models import EventRegistration


def find_by_user_and_event(db: Session, user_id: int, event_id: int) -> EventRegistration | None:
    return (
        db.query(EventRegistration)
        .filter(EventRegistration.user_id == user_id, EventRegistration.event_id == event_id)
        .first()
    )


def exists_by_user_and_event(db: Session, user_id: int, event_id: int) -> bool:
    return find_by_user_and_event(db, user_id, event_id) is not None


def save(db: Session, registration: EventRegistration) -> EventRegistration:
    # flush only; the caller owns the transaction
    db.add(registration)
    db.flush()
    return registration


def delete_by_user_and_event(db: Session, user_id: int, event_id: int) -> int:
    return (
        db.query(EventRegistration)
        .filter(EventRegistration.user_id == user_id, EventRegistration.event_id == event_id)
        .delete(synchronize_session=False)
    )


def count_by_event(db: Session, event_id: int) -> int:
    return db.query(EventRegistration).filter(EventRegistration.event_id == event_id).count()


def registered_event_ids(db: Session, user_id: int, event_ids: list[int]) -> set[int]:
    if not event_ids:
        return set()
    rows = (
        db.query(EventRegistration.event_id)
        .filter(EventRegistration.user_id == user_id, EventRegistration.event_id.in_(event_ids))
        .all()
    )
    return {row[0] for row in rows}
