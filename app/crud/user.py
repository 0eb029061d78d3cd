# User CRUD operations (credential store)
from datetime import datetime

from sqlalchemy import func, or_, update
from sqlalchemy.orm import Session

from app.models.user_models import User, UserRole


def find_by_id(db: Session, user_id: int) -> User | None:
    return db.query(User).filter(User.id == user_id).first()


def find_active_by_id(db: Session, user_id: int) -> User | None:
    return db.query(User).filter(User.id == user_id, User.is_active.is_(True)).first()


def find_by_email(db: Session, email: str) -> User | None:
    return db.query(User).filter(func.lower(User.email) == email.strip().lower()).first()


def find_by_username(db: Session, username: str) -> User | None:
    return db.query(User).filter(User.username == username.strip()).first()


def exists_by_email(db: Session, email: str) -> bool:
    return find_by_email(db, email) is not None


def exists_by_username(db: Session, username: str) -> bool:
    return find_by_username(db, username) is not None


def update_last_login(db: Session, user_id: int, timestamp: datetime) -> None:
    db.execute(update(User).where(User.id == user_id).values(last_login=timestamp))
    db.commit()


def create_user(db: Session, user: User) -> User:
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def query_active(db: Session):
    return db.query(User).filter(User.is_active.is_(True))


def search(db: Session, term: str):
    pattern = f"%{term.strip().lower()}%"
    return query_active(db).filter(
        or_(
            func.lower(User.first_name).like(pattern),
            func.lower(User.last_name).like(pattern),
            func.lower(User.email).like(pattern),
        )
    )


def count_active(db: Session) -> int:
    return query_active(db).count()


def count_by_role(db: Session, role: UserRole) -> int:
    return query_active(db).filter(User.role == role).count()


def distinct_departments(db: Session) -> list[str]:
    rows = (
        db.query(User.department)
        .filter(User.department.isnot(None), User.is_active.is_(True))
        .distinct()
        .order_by(User.department)
        .all()
    )
    return [row[0] for row in rows]


def find_by_ids(db: Session, user_ids: list[int]) -> dict[int, User]:
    if not user_ids:
        return {}
    users = db.query(User).filter(User.id.in_(set(user_ids))).all()
    return {user.id: user for user in users}


def by_role(db: Session, role: UserRole):
    return query_active(db).filter(User.role == role)


def by_department(db: Session, department: str):
    return query_active(db).filter(func.lower(User.department) == department.strip().lower())


def soft_delete(db: Session, user: User) -> User:
    user.is_active = False
    db.commit()
    db.refresh(user)
    return user
