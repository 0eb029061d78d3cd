from sqlalchemy import asc, desc
from sqlalchemy.orm import Query

from app.core.exceptions import BadRequestError


def apply_sort(query: Query, model, sort_by: str, sort_dir: str, allowed: set[str]) -> Query:
    if sort_by not in allowed:
        raise BadRequestError(f"Cannot sort by '{sort_by}'")

    column = getattr(model, sort_by)
    if sort_dir.lower() == "asc":
        return query.order_by(asc(column), asc(model.id))
    if sort_dir.lower() == "desc":
        return query.order_by(desc(column), desc(model.id))
    raise BadRequestError("sort_dir must be 'asc' or 'desc'")


def paginate(query: Query, page: int, size: int) -> tuple[list, int]:
    total = query.order_by(None).count()
    items = query.offset(page * size).limit(size).all()
    return items, total
