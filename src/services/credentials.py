"""Building codes and tenant login credentials.

Credentials are deterministic (room number + building code) so management can
tell a tenant their login without looking it up. Only the bcrypt hash of the
password is stored.
"""

from typing import NamedTuple

import bcrypt


class TenantCredentials(NamedTuple):
    """Generated tenant login. password is plaintext and shown once."""

    username: str
    password: str


def generate_building_code(name: str) -> str:
    """First letter of each word of the building name, lower-cased.

    Example:
        >>> generate_building_code("Green Valley Residency")
        'gvr'
    """
    return "".join(word[0] for word in name.split() if word).lower()


def generate_tenant_credentials(room_number: str, building_code: str) -> TenantCredentials:
    """Derive a tenant's username and password.

    Example:
        >>> generate_tenant_credentials("A-101", "gvr")
        TenantCredentials(username='a-101@gvr', password='pass@a-101@gvr')
    """
    room = str(room_number).strip()
    code = building_code.strip()
    return TenantCredentials(
        username=f"{room}@{code}".lower(),
        password=f"pass@{room}@{code}".lower(),
    )


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Check a plaintext password against a stored bcrypt hash."""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


__all__ = [
    "TenantCredentials",
    "generate_building_code",
    "generate_tenant_credentials",
    "hash_password",
    "verify_password",
]
