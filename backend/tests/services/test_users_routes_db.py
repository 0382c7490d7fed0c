"""Users Routes on SQLite — same endpoints through the SQLAlchemy repository.

Invariants:
    - Updates are committed and visible to later requests
    - Deletes remove the row; deleting again is 404
    - Readiness probe reports the database healthy
    - Ids the int4 column cannot hold are rejected as 400 before any query
    - Taking another user's email is a 409 conflict and rolls back
"""

from sqlalchemy import select

from app.core.domain_types import UserRole
from app.models.user import User
from app.schemas.user import MAX_USER_ID

BOB, CAROL, ALICE = 1, 2, 3


async def test_list_users_from_database(db_client, auth_headers):
    res = await db_client.get("/api/v1/users", headers=auth_headers(BOB))
    assert res.status_code == 200
    assert res.json()["count"] == 3


async def test_update_persists(db_client, auth_headers, test_db):
    res = await db_client.put(
        f"/api/v1/users/{BOB}", json={"email": "Robert@Example.com"},
        headers=auth_headers(BOB),
    )
    assert res.status_code == 200
    assert res.json()["user"]["email"] == "robert@example.com"

    result = await test_db.execute(select(User.email).where(User.id == BOB))
    assert result.scalar_one() == "robert@example.com"


async def test_admin_delete_then_get_and_delete_again(db_client, auth_headers):
    admin = auth_headers(ALICE, UserRole.ADMIN)
    assert (await db_client.delete(f"/api/v1/users/{CAROL}", headers=admin)).status_code == 200
    assert (await db_client.get(f"/api/v1/users/{CAROL}", headers=admin)).status_code == 404
    assert (await db_client.delete(f"/api/v1/users/{CAROL}", headers=admin)).status_code == 404


async def test_role_change_forbidden_leaves_row_untouched(db_client, auth_headers, test_db):
    res = await db_client.put(
        f"/api/v1/users/{BOB}", json={"role": "admin"},
        headers=auth_headers(BOB),
    )
    assert res.status_code == 403

    result = await test_db.execute(select(User.role).where(User.id == BOB))
    assert result.scalar_one() == "user"


async def test_readiness_with_database(db_client):
    res = await db_client.get("/api/v1/health/ready")
    assert res.status_code == 200
    assert res.json()["checks"] == {"database": "healthy"}


async def test_ids_beyond_column_range_are_400_not_server_errors(db_client, auth_headers):
    admin = auth_headers(ALICE, UserRole.ADMIN)
    for res in (
        await db_client.get(f"/api/v1/users/{2**63}", headers=admin),
        await db_client.delete(f"/api/v1/users/{2**64}", headers=admin),
        await db_client.get(f"/api/v1/users/{MAX_USER_ID + 1}", headers=admin),
    ):
        assert res.status_code == 400
        assert res.json()["details"][0]["field"] == "id"


async def test_largest_column_id_is_a_plain_404(db_client, auth_headers):
    res = await db_client.get(
        f"/api/v1/users/{MAX_USER_ID}", headers=auth_headers(ALICE, UserRole.ADMIN),
    )
    assert res.status_code == 404


async def test_update_to_taken_email_is_409_and_row_unchanged(db_client, auth_headers, test_db):
    res = await db_client.put(
        f"/api/v1/users/{BOB}", json={"email": "carol@example.com"},
        headers=auth_headers(BOB),
    )
    assert res.status_code == 409
    body = res.json()
    assert body["code"] == "EMAIL_CONFLICT"
    assert body["severity"] == "warning"

    result = await test_db.execute(select(User.email).where(User.id == BOB))
    assert result.scalar_one() == "bob@example.com"
