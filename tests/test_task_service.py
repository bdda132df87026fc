import pytest

from core.exceptions import NotFoundError, ReferenceNotFoundError, ValidationFailedError
from repositories.models import TaskInput
from services.query_params import ListQuery


def task_input(**overrides) -> TaskInput:
    data = {"name": "Ship", "deadline": "2024-01-01"}
    data.update(overrides)
    return TaskInput.model_validate(data)


@pytest.mark.asyncio
async def test_create_unassigned_task_uses_defaults(task_service, task_repo):
    created = await task_service.create_task(task_input())

    stored = task_repo.get(created["_id"])
    assert stored["assignedUser"] == ""
    assert stored["assignedUserName"] == "unassigned"
    assert stored["description"] == ""
    assert stored["completed"] is False
    assert stored["dateCreated"] is not None


@pytest.mark.asyncio
async def test_create_assigned_task_adds_to_pending_tasks(
    task_service, user_repo, make_user
):
    user = make_user(name="Ada")

    created = await task_service.create_task(task_input(assignedUser=user["_id"]))

    assert created["assignedUser"] == user["_id"]
    assert created["assignedUserName"] == "Ada"
    assert user_repo.get(user["_id"])["pendingTasks"] == [created["_id"]]


@pytest.mark.asyncio
async def test_create_task_ignores_supplied_user_name(task_service, make_user):
    user = make_user(name="Ada")

    created = await task_service.create_task(
        task_input(assignedUser=user["_id"], assignedUserName="Someone else")
    )

    assert created["assignedUserName"] == "Ada"


@pytest.mark.asyncio
@pytest.mark.parametrize("assigned_user", ["65a1f0c2e4b0a1b2c3d4e5f6", "not-an-id"])
async def test_create_task_with_unknown_user_fails(task_service, task_repo, assigned_user):
    with pytest.raises(ReferenceNotFoundError) as excinfo:
        await task_service.create_task(task_input(assignedUser=assigned_user))

    assert excinfo.value.message == "Assigned user does not exist"
    assert excinfo.value.status_code == 400
    assert task_repo.documents == {}


@pytest.mark.asyncio
async def test_get_task_invalid_id(task_service):
    with pytest.raises(ValidationFailedError) as excinfo:
        await task_service.get_task("123")
    assert excinfo.value.message == "Invalid task ID"


@pytest.mark.asyncio
async def test_get_task_not_found(task_service):
    with pytest.raises(NotFoundError) as excinfo:
        await task_service.get_task("65a1f0c2e4b0a1b2c3d4e5f6")
    assert excinfo.value.status_code == 404


@pytest.mark.asyncio
async def test_get_task_with_projection(task_service, make_task):
    task = make_task(name="Ship")

    result = await task_service.get_task(task["_id"], {"name": 1})

    assert result == {"_id": task["_id"], "name": "Ship"}


@pytest.mark.asyncio
async def test_replace_moves_task_between_users(
    task_service, user_repo, make_user, make_task
):
    first = make_user(name="Ada")
    second = make_user(name="Grace")
    task = make_task(user=first)

    result = await task_service.replace_task(
        task["_id"], task_input(assignedUser=second["_id"])
    )

    assert result["assignedUser"] == second["_id"]
    assert result["assignedUserName"] == "Grace"
    assert user_repo.get(first["_id"])["pendingTasks"] == []
    assert user_repo.get(second["_id"])["pendingTasks"] == [task["_id"]]


@pytest.mark.asyncio
async def test_replace_with_same_user_leaves_pending_tasks(
    task_service, user_repo, make_user, make_task
):
    user = make_user(name="Ada")
    other = make_user(name="Grace")
    task = make_task(user=user)

    await task_service.replace_task(
        task["_id"], task_input(name="Renamed", assignedUser=user["_id"])
    )

    assert user_repo.get(user["_id"])["pendingTasks"] == [task["_id"]]
    assert user_repo.get(other["_id"])["pendingTasks"] == []


@pytest.mark.asyncio
async def test_replace_to_unassigned_clears_pending_task(
    task_service, task_repo, user_repo, make_user, make_task
):
    user = make_user()
    task = make_task(user=user)

    await task_service.replace_task(task["_id"], task_input(assignedUser=""))

    stored = task_repo.get(task["_id"])
    assert stored["assignedUser"] == ""
    assert stored["assignedUserName"] == "unassigned"
    assert user_repo.get(user["_id"])["pendingTasks"] == []


@pytest.mark.asyncio
async def test_replace_preserves_date_created(task_service, task_repo, make_task):
    task = make_task()

    await task_service.replace_task(
        task["_id"], task_input(name="New name", completed=True, description="Done")
    )

    stored = task_repo.get(task["_id"])
    assert stored["name"] == "New name"
    assert stored["completed"] is True
    assert stored["description"] == "Done"
    assert stored["dateCreated"].isoformat() == "2023-12-01T00:00:00+00:00"


@pytest.mark.asyncio
async def test_replace_with_unknown_user_changes_nothing(
    task_service, task_repo, user_repo, make_user, make_task
):
    user = make_user()
    task = make_task(user=user)

    with pytest.raises(ReferenceNotFoundError):
        await task_service.replace_task(
            task["_id"], task_input(assignedUser="65a1f0c2e4b0a1b2c3d4e5f6")
        )

    assert task_repo.get(task["_id"])["assignedUser"] == user["_id"]
    assert user_repo.get(user["_id"])["pendingTasks"] == [task["_id"]]


@pytest.mark.asyncio
async def test_replace_missing_task(task_service):
    with pytest.raises(NotFoundError):
        await task_service.replace_task("65a1f0c2e4b0a1b2c3d4e5f6", task_input())


@pytest.mark.asyncio
async def test_delete_removes_task_from_pending_tasks(
    task_service, task_repo, user_repo, make_user, make_task
):
    user = make_user()
    kept = make_task(name="Keep", user=user)
    task = make_task(name="Drop", user=user)

    deleted = await task_service.delete_task(task["_id"])

    assert deleted["_id"] == task["_id"]
    assert task_repo.get(task["_id"]) is None
    assert user_repo.get(user["_id"])["pendingTasks"] == [kept["_id"]]


@pytest.mark.asyncio
async def test_delete_unassigned_task(task_service, task_repo, make_task):
    task = make_task()

    await task_service.delete_task(task["_id"])

    assert task_repo.documents == {}


@pytest.mark.asyncio
async def test_list_tasks_and_count(task_service, make_task):
    make_task(name="b")
    make_task(name="a", completed=True)
    make_task(name="c")

    tasks = await task_service.list_tasks(
        ListQuery(where={"completed": False}, sort=[("name", 1)], limit=100)
    )
    total = await task_service.list_tasks(
        ListQuery(where={"completed": False}, count=True)
    )

    assert [t["name"] for t in tasks] == ["b", "c"]
    assert total == 2


@pytest.mark.asyncio
async def test_list_tasks_skip_and_limit(task_service, make_task):
    for name in ["a", "b", "c", "d"]:
        make_task(name=name)

    tasks = await task_service.list_tasks(
        ListQuery(sort=[("name", -1)], skip=1, limit=2)
    )

    assert [t["name"] for t in tasks] == ["c", "b"]


@pytest.mark.asyncio
async def test_transaction_wraps_reference_updates(task_repo, user_repo, make_user):
    from contextlib import asynccontextmanager

    from services import TaskService

    sessions = []

    @asynccontextmanager
    async def fake_transaction():
        sessions.append("session")
        yield "session"

    service = TaskService(task_repo, user_repo, transaction=fake_transaction)
    user = make_user()

    await service.create_task(task_input(assignedUser=user["_id"]))

    assert sessions == ["session"]


def test_date_only_deadline_is_stored_as_utc():
    from datetime import timezone

    payload = task_input(deadline="2024-01-01")

    assert payload.deadline.tzinfo is timezone.utc
    assert payload.deadline.isoformat() == "2024-01-01T00:00:00+00:00"


def test_deadline_with_offset_is_kept():
    payload = task_input(deadline="2024-01-01T09:00:00+02:00")

    assert payload.deadline.utcoffset().total_seconds() == 7200
