"""Wire paths of the record backend.

Paths are relative to the client's base URL. ``{collection}`` and ``{id}``
are filled in (percent-encoded) by :func:`record_path` and :func:`records_path`.
"""

from urllib.parse import quote

# --- CRUD ---
RECORDS = "/api/collections/{collection}/records"
RECORD = "/api/collections/{collection}/records/{id}"

# --- Authentication ---
ADMIN_AUTH_WITH_PASSWORD = "/api/admins/auth-with-password"
ADMIN_AUTH_REFRESH = "/api/admins/auth-refresh"
COLLECTION_AUTH_WITH_PASSWORD = "/api/collections/{collection}/auth-with-password"
COLLECTION_AUTH_REFRESH = "/api/collections/{collection}/auth-refresh"

USERS_COLLECTION = "users"


def records_path(collection: str) -> str:
    return RECORDS.format(collection=quote(collection, safe=""))


def record_path(collection: str, record_id: str) -> str:
    return RECORD.format(
        collection=quote(collection, safe=""), id=quote(record_id, safe="")
    )


def collection_auth_with_password(collection: str) -> str:
    return COLLECTION_AUTH_WITH_PASSWORD.format(collection=quote(collection, safe=""))


def collection_auth_refresh(collection: str) -> str:
    return COLLECTION_AUTH_REFRESH.format(collection=quote(collection, safe=""))
