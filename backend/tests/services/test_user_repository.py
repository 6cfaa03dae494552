"""User Gateway — verifies SQL persistence, partial updates and error mapping.

Invariants:
    - find_all orders by ascending id; empty table → []
    - Absence → None (find_by_id, find_by_email, update)
    - update with no changes writes nothing and returns current state
    - update touches exactly the supplied fields
    - delete is idempotent
    - ids are never reused after delete
    - Every store failure (query or commit) → PersistenceError with an
      operation-specific message; the session is rolled back and closed
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import SQLAlchemyError

from app.core.domain_types import SetEmail, SetName, UserId
from app.core.errors import PersistenceError
from app.core.users import NewUser
from app.infrastructure.database import DatabaseSessionManager
from app.infrastructure.user_repository import SqlUserRepository


def _new_user(name="Ada", email="ada@example.com"):
    return NewUser(name=name, email=email, password_credential="secret")


async def test_find_all_empty_returns_empty_list(repo):
    assert await repo.find_all() == []


async def test_create_assigns_positive_id_and_returns_full_entity(repo):
    user = await repo.create(_new_user())
    assert user.id > 0
    assert user.name == "Ada"
    assert user.email == "ada@example.com"
    assert user.password_credential == "secret"


async def test_find_all_orders_by_ascending_id(repo):
    first = await repo.create(_new_user("Ada", "ada@example.com"))
    second = await repo.create(_new_user("Bob", "bob@example.com"))
    third = await repo.create(_new_user("Cy", "cy@example.com"))

    users = await repo.find_all()

    assert [u.id for u in users] == [first.id, second.id, third.id]
    assert first.id < second.id < third.id


async def test_find_by_id_returns_none_when_absent(repo):
    assert await repo.find_by_id(UserId(999)) is None


async def test_find_by_id_returns_created_user(repo):
    created = await repo.create(_new_user())
    assert await repo.find_by_id(created.id) == created


async def test_find_by_email_matches_exactly(repo):
    created = await repo.create(_new_user())
    assert await repo.find_by_email("ada@example.com") == created
    assert await repo.find_by_email("nobody@example.com") is None


async def test_create_duplicate_email_is_integrity_violation(repo):
    await repo.create(_new_user())
    with pytest.raises(PersistenceError) as exc_info:
        await repo.create(_new_user("Other", "ada@example.com"))

    assert exc_info.value.integrity_violation is True
    assert exc_info.value.operation == "create"
    assert exc_info.value.message == "Failed to create user."
    assert len(await repo.find_all()) == 1


async def test_update_empty_is_noop(repo):
    created = await repo.create(_new_user())
    assert await repo.update(created.id, []) == created
    assert await repo.find_by_id(created.id) == created


async def test_update_empty_on_missing_user_returns_none(repo):
    assert await repo.update(UserId(42), []) is None


async def test_update_name_only_leaves_email(repo):
    created = await repo.create(_new_user())
    updated = await repo.update(created.id, [SetName("Ada Lovelace")])

    assert updated.name == "Ada Lovelace"
    assert updated.email == "ada@example.com"
    assert updated.password_credential == "secret"


async def test_update_both_fields(repo):
    created = await repo.create(_new_user())
    updated = await repo.update(
        created.id, [SetName("Grace"), SetEmail("grace@example.com")],
    )
    assert (updated.name, updated.email) == ("Grace", "grace@example.com")
    assert await repo.find_by_email("ada@example.com") is None


async def test_update_missing_user_returns_none(repo):
    assert await repo.update(UserId(42), [SetName("Ghost")]) is None


async def test_delete_removes_user(repo):
    created = await repo.create(_new_user())
    await repo.delete(created.id)
    assert await repo.find_by_id(created.id) is None


async def test_delete_is_idempotent(repo):
    created = await repo.create(_new_user())
    await repo.delete(created.id)
    await repo.delete(created.id)
    await repo.delete(UserId(12345))


async def test_ids_are_not_reused_after_delete(repo):
    first = await repo.create(_new_user("Ada", "ada@example.com"))
    await repo.delete(first.id)
    second = await repo.create(_new_user("Bob", "bob@example.com"))
    assert second.id > first.id


@pytest.mark.parametrize(
    "operation, call, message",
    [
        ("find_all", lambda r: r.find_all(), "Failed to fetch users."),
        ("find_by_id", lambda r: r.find_by_id(UserId(1)), "Failed to fetch user by ID."),
        ("find_by_email", lambda r: r.find_by_email("a@b.co"), "Failed to fetch user by email."),
        ("create", lambda r: r.create(_new_user()), "Failed to create user."),
        ("update", lambda r: r.update(UserId(1), [SetName("Xy")]), "Failed to update user."),
        ("delete", lambda r: r.delete(UserId(1)), "Failed to delete user."),
    ],
)
async def test_store_failure_maps_to_persistence_error(
    broken_manager, operation, call, message,
):
    repo = SqlUserRepository(broken_manager)
    with pytest.raises(PersistenceError) as exc_info:
        await call(repo)

    err = exc_info.value
    assert err.operation == operation
    assert err.message == message
    assert err.http_status == 503
    assert "no such table" not in err.message


def _manager_failing_on_commit():
    fake_session = MagicMock()
    fake_session.execute = AsyncMock()
    fake_session.commit = AsyncMock(side_effect=SQLAlchemyError("commit failed"))
    fake_session.rollback = AsyncMock()
    fake_session.close = AsyncMock()
    manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    manager._session_factory = MagicMock(return_value=fake_session)
    return manager, fake_session


@pytest.mark.parametrize(
    "operation, call, message",
    [
        ("create", lambda r: r.create(_new_user()), "Failed to create user."),
        ("update", lambda r: r.update(UserId(1), [SetName("Xy")]), "Failed to update user."),
        ("delete", lambda r: r.delete(UserId(1)), "Failed to delete user."),
    ],
)
async def test_commit_failure_maps_to_persistence_error(operation, call, message):
    manager, fake_session = _manager_failing_on_commit()
    repo = SqlUserRepository(manager)

    with pytest.raises(PersistenceError) as exc_info:
        await call(repo)

    err = exc_info.value
    assert err.operation == operation
    assert err.message == message
    assert err.integrity_violation is False
    assert "commit failed" not in err.message
    fake_session.commit.assert_awaited_once()
    fake_session.rollback.assert_awaited_once()
    fake_session.close.assert_awaited_once()
