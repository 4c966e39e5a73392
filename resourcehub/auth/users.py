from __future__ import annotations

from typing import Any

import bcrypt

_users: dict[str, dict[str, Any]] = {}


def _hash_password(plain: str) -> str:
    return bcrypt.hashpw(plain.encode(), bcrypt.gensalt()).decode()


def _verify_password(plain: str, hashed: str) -> bool:
    return bcrypt.checkpw(plain.encode(), hashed.encode())


def _public(record: dict[str, Any]) -> dict[str, Any]:
    return {
        "id": record["id"],
        "name": record["name"],
        "email": record["email"],
        "role": record["role"],
    }


def _add_user(user_id: int, name: str, email: str, password: str, role: str = "user") -> None:
    _users[email.lower()] = {
        "id": user_id,
        "name": name,
        "email": email,
        "role": role,
        "password_hash": _hash_password(password),
    }


def _seed_users() -> None:
    """Pre-seed demo users on import; ids match the seeded resource uploaders."""
    _add_user(1, "Alice Martin", "alice@example.com", "alice123")
    _add_user(2, "Bob Chen", "bob@example.com", "bob123")
    _add_user(3, "Admin", "admin@example.com", "admin123", role="admin")


def authenticate(email: str, password: str) -> dict[str, Any] | None:
    """Verify credentials. Returns ``{id, name, email, role}`` or ``None``."""
    record = _users.get(email.strip().lower())
    if record and _verify_password(password, record["password_hash"]):
        return _public(record)
    return None


def get_user(user_id: int | None) -> dict[str, Any] | None:
    for record in _users.values():
        if record["id"] == user_id:
            return _public(record)
    return None


_seed_users()
