import logging
from datetime import datetime

from sqlalchemy.orm import Session

from app.core.exceptions import BadRequestError, ForbiddenError, NotFoundError
from app.crud import event as event_crud
from app.crud import event_registration as registration_crud
from app.crud import user as user_crud
from app.crud.pagination import apply_sort, paginate
from app.models.event_models import Event
from app.models.event_registration_models import EventRegistration
from app.schemas.event_schemas import (
    EventCreateSchema,
    EventResponse,
    EventUpdateSchema,
    OrganizerInfo,
)
from app.schemas.page_schemas import Page
from app.services import registration_service
from app.services.access_control import is_owner_or_admin
from app.services.principal_resolver import Principal
from app.utils.clock import utcnow

logger = logging.getLogger(__name__)

EVENT_SORT_FIELDS = {"event_date", "created_at", "title", "category", "current_attendees"}


# -------------------------
# RESPONSE BUILDING
# -------------------------
def _is_registration_open(event: Event, now: datetime) -> bool:
    if not event.is_active or event.is_full:
        return False
    if event.registration_deadline is not None and now >= event.registration_deadline:
        return False
    return event.event_date >= now.date()


def _to_responses(
    db: Session,
    events: list[Event],
    principal: Principal | None,
    now: datetime,
) -> list[EventResponse]:
    organizers = user_crud.find_by_ids(db, [event.organizer_id for event in events])
    registered = set()
    if principal is not None:
        registered = registration_crud.registered_event_ids(
            db, principal.id, [event.id for event in events]
        )

    responses = []
    for event in events:
        organizer = organizers.get(event.organizer_id)
        responses.append(
            EventResponse(
                id=event.id,
                title=event.title,
                description=event.description,
                long_description=event.long_description,
                category=event.category,
                event_date=event.event_date,
                start_time=event.start_time,
                end_time=event.end_time,
                location=event.location,
                max_attendees=event.max_attendees,
                current_attendees=event.current_attendees,
                requirements=event.requirements,
                tags=event.tags or [],
                is_featured=event.is_featured,
                is_active=event.is_active,
                registration_deadline=event.registration_deadline,
                created_at=event.created_at,
                updated_at=event.updated_at,
                organizer=(
                    OrganizerInfo(id=organizer.id, name=organizer.full_name, email=organizer.email)
                    if organizer
                    else None
                ),
                is_registered=event.id in registered,
                available_spots=event.available_spots,
                is_registration_open=_is_registration_open(event, now),
                is_past_event=event.event_date < now.date(),
            )
        )
    return responses


def _to_page(
    db: Session,
    query,
    principal: Principal | None,
    page: int,
    size: int,
    sort_by: str | None = None,
    sort_dir: str = "asc",
) -> Page[EventResponse]:
    if sort_by is not None:
        query = apply_sort(query, Event, sort_by, sort_dir, EVENT_SORT_FIELDS)
    items, total = paginate(query, page, size)
    return Page[EventResponse](
        items=_to_responses(db, items, principal, utcnow()),
        total=total,
        page=page,
        size=size,
    )


def _get_active_event(db: Session, event_id: int) -> Event:
    event = event_crud.find_active_by_id(db, event_id)
    if not event:
        raise NotFoundError("Event", event_id)
    return event


# -------------------------
# CREATE
# -------------------------
def create_event(
    db: Session,
    payload: EventCreateSchema,
    principal: Principal,
    now: datetime | None = None,
) -> EventResponse:
    now = now or utcnow()
    if payload.event_date < now.date():
        raise BadRequestError("Event date must be in the future")

    event = Event(
        title=payload.title.strip(),
        description=payload.description.strip(),
        long_description=payload.long_description,
        category=payload.category.strip(),
        event_date=payload.event_date,
        start_time=payload.start_time,
        end_time=payload.end_time,
        location=payload.location.strip(),
        max_attendees=payload.max_attendees,
        current_attendees=0,
        organizer_id=principal.id,
        requirements=payload.requirements,
        tags=payload.tags or [],
        is_featured=payload.is_featured,
        is_active=True,
        registration_deadline=payload.registration_deadline,
    )
    db.add(event)
    db.commit()
    db.refresh(event)

    logger.info("Event %s created by user %s", event.id, principal.id)
    return _to_responses(db, [event], principal, now)[0]


# -------------------------
# READ
# -------------------------
def get_event(
    db: Session,
    event_id: int,
    principal: Principal | None,
    now: datetime | None = None,
) -> EventResponse:
    event = _get_active_event(db, event_id)
    return _to_responses(db, [event], principal, now or utcnow())[0]


def list_events(db: Session, principal, page, size, sort_by, sort_dir) -> Page[EventResponse]:
    return _to_page(db, event_crud.query_active(db), principal, page, size, sort_by, sort_dir)


def events_by_category(db: Session, category: str, principal, page, size) -> Page[EventResponse]:
    return _to_page(db, event_crud.by_category(db, category), principal, page, size, "event_date")


def featured_events(db: Session, principal, page, size) -> Page[EventResponse]:
    return _to_page(db, event_crud.featured(db), principal, page, size, "event_date")


def search_events(db: Session, term: str, principal, page, size) -> Page[EventResponse]:
    return _to_page(db, event_crud.search(db, term), principal, page, size, "event_date")


def upcoming_events(db: Session, principal, page, size) -> Page[EventResponse]:
    query = event_crud.upcoming(db, utcnow().date())
    return _to_page(db, query, principal, page, size, "event_date")


def my_registrations(db: Session, principal: Principal, page, size) -> Page[EventResponse]:
    query = event_crud.registered_by_user(db, principal.id)
    return _to_page(db, query, principal, page, size, "event_date")


def get_categories(db: Session) -> list[str]:
    return event_crud.distinct_categories(db)


# -------------------------
# UPDATE / DELETE
# -------------------------
def update_event(
    db: Session,
    event_id: int,
    payload: EventUpdateSchema,
    principal: Principal,
    now: datetime | None = None,
) -> EventResponse:
    now = now or utcnow()
    event = _get_active_event(db, event_id)

    if not is_owner_or_admin(principal, event.organizer_id):
        raise ForbiddenError()

    changes = payload.model_dump(exclude_unset=True)

    if changes.get("event_date") is not None and changes["event_date"] < now.date():
        raise BadRequestError("Event date must be in the future")

    max_attendees = changes.get("max_attendees")
    if max_attendees is not None and max_attendees < event.current_attendees:
        raise BadRequestError("Maximum attendees cannot be less than current attendees")

    start = changes.get("start_time") or event.start_time
    end = changes.get("end_time") or event.end_time
    if end <= start:
        raise BadRequestError("End time must be after start time")

    for field, value in changes.items():
        # explicit nulls only clear the optional columns
        if value is None and field not in ("long_description", "requirements", "tags", "registration_deadline"):
            continue
        setattr(event, field, value)

    db.commit()
    db.refresh(event)

    logger.info("Event %s updated by user %s", event_id, principal.id)
    return _to_responses(db, [event], principal, now)[0]


def delete_event(db: Session, event_id: int, principal: Principal) -> None:
    event = _get_active_event(db, event_id)

    if not is_owner_or_admin(principal, event.organizer_id):
        raise ForbiddenError()

    event.is_active = False
    db.commit()
    logger.info("Event %s deactivated by user %s", event_id, principal.id)


# -------------------------
# REGISTRATION
# -------------------------
def register(db: Session, event_id: int, principal: Principal) -> EventRegistration:
    return registration_service.register_for_event(db, event_id, principal.id)


def unregister(db: Session, event_id: int, principal: Principal) -> None:
    registration_service.unregister_from_event(db, event_id, principal.id)
