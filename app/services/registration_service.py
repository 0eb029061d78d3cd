"""Event registration with capacity, deadline and past-event checks.

Each operation runs as one transaction on the caller's session: the
registration row and the attendee counter change together or not at all.
The counter itself is only ever moved by conditional UPDATE statements in
`app.crud.event`, so concurrent registrations cannot lose updates.
"""

import logging
from datetime import datetime

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.exceptions import (
    CapacityExceededError,
    ConflictError,
    DeadlinePassedError,
    EventInPastError,
    NotFoundError,
    NotRegisteredError,
)
from app.crud import event as event_crud
from app.crud import event_registration as registration_crud
from app.crud import user as user_crud
from app.models.event_registration_models import AttendanceStatus, EventRegistration
from app.utils.clock import utcnow

logger = logging.getLogger(__name__)


def register_for_event(
    db: Session,
    event_id: int,
    user_id: int,
    now: datetime | None = None,
) -> EventRegistration:
    now = now or utcnow()

    event = event_crud.find_active_by_id(db, event_id)
    if not event:
        raise NotFoundError("Event", event_id)

    if not user_crud.find_active_by_id(db, user_id):
        raise NotFoundError("User", user_id)

    if registration_crud.exists_by_user_and_event(db, user_id, event_id):
        raise ConflictError("User is already registered for this event")

    if event.current_attendees >= event.max_attendees:
        raise CapacityExceededError()

    if event.registration_deadline is not None and now >= event.registration_deadline:
        raise DeadlinePassedError()

    if event.event_date < now.date():
        raise EventInPastError()

    registration = EventRegistration(
        user_id=user_id,
        event_id=event_id,
        attendance_status=AttendanceStatus.REGISTERED,
        registration_date=now,
    )
    try:
        registration_crud.save(db, registration)
    except IntegrityError:
        # lost the race against a concurrent registration by the same user
        db.rollback()
        raise ConflictError("User is already registered for this event")

    if not event_crud.increment_attendee_count(db, event_id):
        # someone else took the last seat between the check and the update
        db.rollback()
        raise CapacityExceededError()

    db.commit()
    db.refresh(registration)

    logger.info("User %s registered for event %s", user_id, event_id)
    return registration


def unregister_from_event(db: Session, event_id: int, user_id: int) -> None:
    if not event_crud.find_active_by_id(db, event_id):
        raise NotFoundError("Event", event_id)

    deleted = registration_crud.delete_by_user_and_event(db, user_id, event_id)
    if not deleted:
        db.rollback()
        raise NotRegisteredError()

    if not event_crud.decrement_attendee_count(db, event_id):
        logger.warning("Attendee count for event %s already at zero", event_id)

    db.commit()
    logger.info("User %s unregistered from event %s", user_id, event_id)
