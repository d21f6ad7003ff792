from typing import List, Optional

import pytest
from fastapi.testclient import TestClient

from userapi.api.main import create_app
from userapi.api.models import User
from userapi.errors import StoreError


class InMemoryDatabase:
    """Stand-in for the Postgres gateway that keeps rows in a dict."""

    def __init__(self):
        self.rows = {}
        self.next_id = 1
        self.connected = False
        self.closed = False
        self.failure: Optional[str] = None

    @property
    def is_connected(self) -> bool:
        return self.connected

    async def connect(self):
        self.connected = True

    async def close(self):
        self.connected = False
        self.closed = True

    def _check(self):
        if self.failure is not None:
            raise StoreError(self.failure)

    async def list_users(self) -> List[User]:
        self._check()
        return [User(id=user_id, **fields) for user_id, fields in self.rows.items()]

    async def insert_user(self, name: str, email: str):
        self._check()
        self.rows[self.next_id] = {"name": name, "email": email}
        self.next_id += 1

    async def update_user(self, user_id: int, name: str, email: str):
        self._check()
        if user_id in self.rows:
            self.rows[user_id] = {"name": name, "email": email}

    async def delete_user(self, user_id: int):
        self._check()
        self.rows.pop(user_id, None)


@pytest.fixture
def database():
    return InMemoryDatabase()


@pytest.fixture
def client(database):
    with TestClient(create_app(database)) as client:
        yield client
