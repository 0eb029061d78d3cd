"""Tests for the CSV user seed generator.

Run with: pytest tests/test_seed_users.py -v
"""

import pytest

from app.seeds.gen_users import build_rows, gen_password
from app.utils.hashing import verify_password


def test_gen_password_avoids_confusing_characters():
    password = gen_password(200)

    assert len(password) == 200
    assert not set(password) & set("0OoIl")


def test_build_rows_hashes_passwords():
    rows = [
        {"username": "ada", "email": "ADA@campus.edu", "first_name": "Ada", "last_name": "L"},
        {"username": "dup", "email": "ada@campus.edu", "first_name": "D", "last_name": "U"},
        {"username": "", "email": "skip@campus.edu", "first_name": "S", "last_name": "K"},
        {"username": "root", "email": "root@campus.edu", "first_name": "R", "last_name": "T", "role": "admin"},
    ]

    import_rows, admin_rows = build_rows(rows, password_factory=lambda: "plain-password")

    assert [r["username"] for r in import_rows] == ["ada", "root"]
    assert import_rows[0]["email"] == "ada@campus.edu"
    assert import_rows[1]["role"] == "ADMIN"
    assert verify_password("plain-password", import_rows[0]["password_hash"])
    assert admin_rows[0]["password"] == "plain-password"


def test_build_rows_rejects_unknown_role():
    with pytest.raises(ValueError):
        build_rows([{"username": "x", "email": "x@campus.edu", "role": "wizard"}])


def test_build_rows_skips_repeated_username():
    rows = [
        {"username": "ada", "email": "ada@campus.edu", "first_name": "Ada", "last_name": "L"},
        {"username": "ada", "email": "other@campus.edu", "first_name": "Ada", "last_name": "K"},
    ]

    import_rows, admin_rows = build_rows(rows, password_factory=lambda: "plain-password")

    assert [r["email"] for r in import_rows] == ["ada@campus.edu"]
    assert len(admin_rows) == 1
