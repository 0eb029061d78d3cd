import csv
import secrets
import string
import sys
from pathlib import Path

from app.models.user_models import UserRole
from app.utils.hashing import get_password_hash

BASE_DIR = Path(__file__).resolve().parent

INPUT = BASE_DIR / "users_seed.csv"
OUT_IMPORT = BASE_DIR / "users_import.csv"
OUT_ADMIN = BASE_DIR / "users_passwords.csv"

REQUIRED_COLUMNS = {"username", "email", "first_name", "last_name"}
IMPORT_COLUMNS = [
    "username", "email", "password_hash", "first_name", "last_name",
    "role", "department", "academic_year",
]


def gen_password(length: int = 12) -> str:
    chars = string.ascii_letters + string.digits
    for c in "0OoIl":  # remove confusing chars
        chars = chars.replace(c, "")
    return "".join(secrets.choice(chars) for _ in range(length))


def build_rows(rows, password_factory=gen_password) -> tuple[list[dict], list[dict]]:
    """Return (import rows with hashes, admin rows with plain passwords)."""
    import_rows = []
    admin_rows = []
    seen = set()
    seen_usernames = set()

    for r in rows:
        username = (r.get("username") or "").strip()
        email = (r.get("email") or "").strip().lower()
        if not username or not email or email in seen or username in seen_usernames:
            continue
        seen.add(email)
        seen_usernames.add(username)

        role = (r.get("role") or UserRole.STUDENT.value).strip().upper()
        UserRole(role)  # reject unknown roles early

        plain = password_factory()
        import_rows.append({
            "username": username,
            "email": email,
            "password_hash": get_password_hash(plain),
            "first_name": (r.get("first_name") or "").strip(),
            "last_name": (r.get("last_name") or "").strip(),
            "role": role,
            "department": (r.get("department") or "").strip() or None,
            "academic_year": (r.get("academic_year") or "").strip() or None,
        })
        admin_rows.append({"username": username, "email": email, "password": plain})

    return import_rows, admin_rows


def main(input_path: Path = INPUT):
    if not input_path.exists():
        raise FileNotFoundError(f"Missing file: {input_path}")

    with input_path.open(newline="", encoding="utf-8") as f:
        reader = csv.DictReader(f)
        if not REQUIRED_COLUMNS.issubset(reader.fieldnames or []):
            raise ValueError(f"{input_path.name} must have: {', '.join(sorted(REQUIRED_COLUMNS))}")
        import_rows, admin_rows = build_rows(reader)

    with OUT_IMPORT.open("w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=IMPORT_COLUMNS)
        w.writeheader()
        w.writerows(import_rows)

    with OUT_ADMIN.open("w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=["username", "email", "password"])
        w.writeheader()
        w.writerows(admin_rows)

    print("Import into users table:", OUT_IMPORT)
    print("Distribute to users:", OUT_ADMIN)
    print("Rows created:", len(import_rows))


if __name__ == "__main__":
    main(Path(sys.argv[1]) if len(sys.argv) > 1 else INPUT)
