from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional

from app.db.database import get_db
from app.schemas.auth_schemas import MessageResponse
from app.schemas.event_schemas import (
    EventCreateSchema,
    EventResponse,
    EventUpdateSchema,
    RegistrationResponse,
)
from app.schemas.page_schemas import Page
from app.services import event_service
from app.services.access_control import ADMIN_ONLY, AUTHENTICATED
from app.services.dependencies import get_optional_principal, require
from app.services.principal_resolver import Principal

router = APIRouter(prefix="/events", tags=["Events"])


@router.get("", response_model=Page[EventResponse])
def list_events(
    page: int = Query(0, ge=0),
    size: int = Query(20, ge=1, le=100),
    sort_by: str = Query("event_date"),
    sort_dir: str = Query("asc"),
    principal: Optional[Principal] = Depends(get_optional_principal),
    db: Session = Depends(get_db),
):
    return event_service.list_events(db, principal, page, size, sort_by, sort_dir)


@router.post("", response_model=EventResponse, status_code=status.HTTP_201_CREATED)
def create_event(
    payload: EventCreateSchema,
    principal: Principal = Depends(require(ADMIN_ONLY)),
    db: Session = Depends(get_db),
):
    return event_service.create_event(db, payload, principal)


@router.get("/categories", response_model=List[str])
def event_categories(db: Session = Depends(get_db)):
    return event_service.get_categories(db)


@router.get("/featured", response_model=Page[EventResponse])
def featured_events(
    page: int = Query(0, ge=0),
    size: int = Query(20, ge=1, le=100),
    principal: Optional[Principal] = Depends(get_optional_principal),
    db: Session = Depends(get_db),
):
    return event_service.featured_events(db, principal, page, size)


@router.get("/upcoming", response_model=Page[EventResponse])
def upcoming_events(
    page: int = Query(0, ge=0),
    size: int = Query(20, ge=1, le=100),
    principal: Optional[Principal] = Depends(get_optional_principal),
    db: Session = Depends(get_db),
):
    return event_service.upcoming_events(db, principal, page, size)


@router.get("/search", response_model=Page[EventResponse])
def search_events(
    q: str = Query(..., min_length=1),
    page: int = Query(0, ge=0),
    size: int = Query(20, ge=1, le=100),
    principal: Optional[Principal] = Depends(get_optional_principal),
    db: Session = Depends(get_db),
):
    return event_service.search_events(db, q, principal, page, size)


@router.get("/category/{category}", response_model=Page[EventResponse])
def events_by_category(
    category: str,
    page: int = Query(0, ge=0),
    size: int = Query(20, ge=1, le=100),
    principal: Optional[Principal] = Depends(get_optional_principal),
    db: Session = Depends(get_db),
):
    return event_service.events_by_category(db, category, principal, page, size)


@router.get("/my-registrations", response_model=Page[EventResponse])
def my_registrations(
    page: int = Query(0, ge=0),
    size: int = Query(20, ge=1, le=100),
    principal: Principal = Depends(require(AUTHENTICATED)),
    db: Session = Depends(get_db),
):
    return event_service.my_registrations(db, principal, page, size)


@router.get("/{event_id}", response_model=EventResponse)
def get_event(
    event_id: int,
    principal: Optional[Principal] = Depends(get_optional_principal),
    db: Session = Depends(get_db),
):
    return event_service.get_event(db, event_id, principal)


@router.put("/{event_id}", response_model=EventResponse)
def update_event(
    event_id: int,
    payload: EventUpdateSchema,
    principal: Principal = Depends(require(AUTHENTICATED)),
    db: Session = Depends(get_db),
):
    return event_service.update_event(db, event_id, payload, principal)


@router.delete("/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_event(
    event_id: int,
    principal: Principal = Depends(require(AUTHENTICATED)),
    db: Session = Depends(get_db),
):
    event_service.delete_event(db, event_id, principal)


# -------------------------
# REGISTRATION
# -------------------------
@router.post(
    "/{event_id}/register",
    response_model=RegistrationResponse,
    status_code=status.HTTP_201_CREATED,
)
def register_for_event(
    event_id: int,
    principal: Principal = Depends(require(AUTHENTICATED)),
    db: Session = Depends(get_db),
):
    return event_service.register(db, event_id, principal)


@router.delete("/{event_id}/register", response_model=MessageResponse)
def unregister_from_event(
    event_id: int,
    principal: Principal = Depends(require(AUTHENTICATED)),
    db: Session = Depends(get_db),
):
    event_service.unregister(db, event_id, principal)
    return MessageResponse(message="Successfully unregistered from event")
