import copy
import importlib.util
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient

from core.exceptions import DuplicateKeyError
from repositories.interfaces import ITaskRepository, IUserRepository
from repositories.models import UNASSIGNED_USER, UNASSIGNED_USER_NAME
from repositories.objectid_utils import is_valid_objectid
from services import TaskService, UserService

PROJECT_ROOT = Path(__file__).resolve().parent.parent


# ---------------------------------------------------------------------------
# In-memory repositories
# ---------------------------------------------------------------------------


def _plain(value: Any) -> Any:
    return str(value) if isinstance(value, ObjectId) else value


def _matches_condition(actual: Any, condition: Any) -> bool:
    if isinstance(condition, dict) and any(k.startswith("$") for k in condition):
        for op, operand in condition.items():
            if op == "$in":
                values = [_plain(v) for v in operand]
                if isinstance(actual, list):
                    if not any(a in values for a in actual):
                        return False
                elif actual not in values:
                    return False
            elif op == "$nin" and actual in [_plain(v) for v in operand]:
                return False
            elif op == "$eq" and actual != _plain(operand):
                return False
            elif op == "$ne" and actual == _plain(operand):
                return False
            elif op == "$gt" and not (actual is not None and actual > operand):
                return False
            elif op == "$gte" and not (actual is not None and actual >= operand):
                return False
            elif op == "$lt" and not (actual is not None and actual < operand):
                return False
            elif op == "$lte" and not (actual is not None and actual <= operand):
                return False
        return True
    condition = _plain(condition)
    if isinstance(actual, list) and not isinstance(condition, list):
        return condition in actual
    return actual == condition


def _matches(document: Dict, filter_dict: Dict) -> bool:
    for key, condition in filter_dict.items():
        if key == "$or":
            if not any(_matches(document, branch) for branch in condition):
                return False
        elif key == "$and":
            if not all(_matches(document, branch) for branch in condition):
                return False
        elif not _matches_condition(document.get(key), condition):
            return False
    return True


def _project(document: Dict, projection: Optional[Dict]) -> Dict:
    if not projection:
        return document
    include = {k for k, v in projection.items() if v and k != "_id"}
    exclude = {k for k, v in projection.items() if not v}
    if include:
        result = {k: v for k, v in document.items() if k in include}
        if "_id" not in exclude:
            result["_id"] = document["_id"]
        return result
    return {k: v for k, v in document.items() if k not in exclude}


class InMemoryRepository:
    """Collection stand-in keyed by string ObjectId."""

    def __init__(self):
        self.documents: Dict[str, Dict] = {}

    def seed(self, **fields) -> Dict:
        doc_id = str(ObjectId())
        self.documents[doc_id] = {"_id": doc_id, **fields}
        return copy.deepcopy(self.documents[doc_id])

    def get(self, doc_id: str) -> Optional[Dict]:
        return copy.deepcopy(self.documents.get(doc_id))

    async def find(self, filter_dict, sort=None, projection=None, skip=0, limit=0):
        docs = [d for d in self.documents.values() if _matches(d, filter_dict or {})]
        for field_name, direction in reversed(sort or []):
            docs.sort(key=lambda d: d.get(field_name), reverse=direction < 0)
        docs = docs[skip:]
        if limit:
            docs = docs[:limit]
        return [copy.deepcopy(_project(d, projection)) for d in docs]

    async def count(self, filter_dict):
        return sum(1 for d in self.documents.values() if _matches(d, filter_dict or {}))

    async def find_by_id(self, document_id, projection=None):
        doc = self.documents.get(document_id)
        return copy.deepcopy(_project(doc, projection)) if doc else None

    async def find_by_ids(self, document_ids, session=None):
        return [copy.deepcopy(self.documents[i]) for i in document_ids if i in self.documents]

    async def delete_by_id(self, document_id, session=None):
        return self.documents.pop(document_id, None) is not None

    def _insert(self, data: Dict) -> Dict:
        doc_id = str(ObjectId())
        self.documents[doc_id] = {"_id": doc_id, **data}
        return copy.deepcopy(self.documents[doc_id])

    def _replace(self, doc_id: str, data: Dict) -> Dict:
        self.documents[doc_id] = {"_id": doc_id, **data}
        return copy.deepcopy(self.documents[doc_id])


class InMemoryTaskRepository(InMemoryRepository, ITaskRepository):
    async def create(self, task, session=None):
        return self._insert(task.to_dict())

    async def replace(self, task_id, task, session=None):
        return self._replace(task_id, task.to_dict())

    async def assign(self, task_ids, user_id, user_name, session=None):
        modified = 0
        for task_id in task_ids:
            doc = self.documents.get(task_id)
            if doc is not None:
                doc["assignedUser"] = user_id
                doc["assignedUserName"] = user_name
                modified += 1
        return modified

    async def unassign(self, task_ids, user_id, session=None):
        modified = 0
        for task_id in task_ids:
            doc = self.documents.get(task_id)
            if doc is not None and doc.get("assignedUser") == user_id:
                doc["assignedUser"] = UNASSIGNED_USER
                doc["assignedUserName"] = UNASSIGNED_USER_NAME
                modified += 1
        return modified

    async def unassign_incomplete(self, user_id, session=None):
        modified = 0
        for doc in self.documents.values():
            if doc.get("assignedUser") == user_id and not doc.get("completed"):
                doc["assignedUser"] = UNASSIGNED_USER
                doc["assignedUserName"] = UNASSIGNED_USER_NAME
                modified += 1
        return modified


class InMemoryUserRepository(InMemoryRepository, IUserRepository):
    def _email_taken(self, email: str, exclude_id: Optional[str] = None) -> bool:
        return any(
            d["email"] == email and d["_id"] != exclude_id for d in self.documents.values()
        )

    async def create(self, user, session=None):
        if self._email_taken(user.email):
            raise DuplicateKeyError("Email already exists")
        return self._insert(user.to_dict())

    async def replace(self, user_id, user, session=None):
        if self._email_taken(user.email, exclude_id=user_id):
            raise DuplicateKeyError("Email already exists")
        return self._replace(user_id, user.to_dict())

    async def add_pending_task(self, user_id, task_id, session=None):
        doc = self.documents.get(user_id)
        if doc is None or task_id in doc["pendingTasks"]:
            return False
        doc["pendingTasks"].append(task_id)
        return True

    async def remove_pending_task(self, user_id, task_id, session=None):
        doc = self.documents.get(user_id)
        if doc is None or task_id not in doc["pendingTasks"]:
            return False
        doc["pendingTasks"] = [t for t in doc["pendingTasks"] if t != task_id]
        return True

    async def release_tasks(self, task_ids, new_owner_id, session=None):
        modified = 0
        for doc in self.documents.values():
            if doc["_id"] == new_owner_id:
                continue
            kept = [t for t in doc["pendingTasks"] if t not in task_ids]
            if len(kept) != len(doc["pendingTasks"]):
                doc["pendingTasks"] = kept
                modified += 1
        return modified


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def task_repo() -> InMemoryTaskRepository:
    return InMemoryTaskRepository()


@pytest.fixture
def user_repo() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture
def task_service(task_repo, user_repo) -> TaskService:
    return TaskService(task_repo, user_repo)


@pytest.fixture
def user_service(task_repo, user_repo) -> UserService:
    return UserService(user_repo, task_repo)


@pytest.fixture
def make_user(user_repo):
    def _make(name="Ada", email=None, pending_tasks: List[str] = None) -> Dict:
        return user_repo.seed(
            name=name,
            email=email or f"{name.lower()}-{ObjectId()}@example.com",
            pendingTasks=list(pending_tasks or []),
        )

    return _make


@pytest.fixture
def make_task(task_repo, user_repo):
    """Seed a task, registering it with its user when assigned."""

    def _make(name="Ship", user: Optional[Dict] = None, completed=False) -> Dict:
        task = task_repo.seed(
            name=name,
            description="",
            deadline="2024-01-01T00:00:00+00:00",
            completed=completed,
            assignedUser=user["_id"] if user else UNASSIGNED_USER,
            assignedUserName=user["name"] if user else UNASSIGNED_USER_NAME,
            dateCreated="2023-12-01T00:00:00+00:00",
        )
        if user:
            user_repo.documents[user["_id"]]["pendingTasks"].append(task["_id"])
        return task

    return _make


def _load_main_module():
    # Import cmd/api/main.py by path to avoid conflict with stdlib cmd
    file_path = PROJECT_ROOT / "cmd" / "api" / "main.py"
    spec = importlib.util.spec_from_file_location("task_manager_api_main", file_path)
    module = importlib.util.module_from_spec(spec)
    sys.modules["task_manager_api_main"] = module
    spec.loader.exec_module(module)
    return module


@pytest.fixture(scope="session")
def main_module():
    return _load_main_module()


@pytest.fixture
def app(main_module, task_service, user_service):
    from internal.api.dependencies import get_task_service, get_user_service

    application = main_module.create_app()
    application.dependency_overrides[get_task_service] = lambda: task_service
    application.dependency_overrides[get_user_service] = lambda: user_service
    return application


@pytest.fixture
def client(app):
    # Not used as a context manager: the lifespan (MongoDB connect) is skipped
    return TestClient(app)
