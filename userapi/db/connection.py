import asyncio
import logging
from typing import List, Optional

import asyncpg

from userapi.api.models import User
from userapi.errors import StartupError, StoreError

CREATE_USERS_TABLE = """
    CREATE TABLE IF NOT EXISTS users (
        id SERIAL PRIMARY KEY,
        name TEXT NOT NULL,
        email TEXT NOT NULL
    )
"""
SELECT_USERS = "SELECT id, name, email FROM users"
INSERT_USER = "INSERT INTO users (name, email) VALUES ($1, $2)"
UPDATE_USER = "UPDATE users SET name = $1, email = $2 WHERE id = $3"
DELETE_USER = "DELETE FROM users WHERE id = $1"

# Errors the driver raises once a connection exists
DRIVER_ERRORS = (asyncpg.PostgresError, asyncpg.InterfaceError, OSError)
# asyncpg reports an unparseable DSN as ValueError
STARTUP_ERRORS = DRIVER_ERRORS + (asyncio.TimeoutError, ValueError)


class Database:
    """Owns the single asyncpg connection shared by every request.

    Statements are serialized one at a time through a lock, since asyncpg
    rejects overlapping operations on one connection. Nothing spans more
    than one statement, so a write followed by a listing is not atomic.
    """

    def __init__(self, dsn: str):
        self.dsn = dsn
        self.conn: Optional[asyncpg.Connection] = None
        self._lock = asyncio.Lock()

    @property
    def is_connected(self) -> bool:
        return self.conn is not None and not self.conn.is_closed()

    async def connect(self):
        try:
            self.conn = await asyncpg.connect(self.dsn)
            logging.info("Database connection established")
            await self.create_schema()
        except STARTUP_ERRORS as e:
            await self.close()
            raise StartupError(str(e)) from e
        logging.info("Users table ready")

    async def create_schema(self):
        try:
            await self.conn.execute(CREATE_USERS_TABLE)
        except asyncpg.UniqueViolationError:
            # Lost the race against another process creating the same table
            logging.info("Users table created concurrently by another process")

    async def close(self):
        if self.conn is not None:
            conn, self.conn = self.conn, None
            await conn.close()
            logging.info("Database connection closed")

    async def fetch(self, query: str, *args) -> List[asyncpg.Record]:
        async with self._lock:
            try:
                return await self._connection().fetch(query, *args)
            except DRIVER_ERRORS as e:
                raise StoreError(str(e)) from e

    async def execute(self, query: str, *args) -> str:
        async with self._lock:
            try:
                return await self._connection().execute(query, *args)
            except DRIVER_ERRORS as e:
                raise StoreError(str(e)) from e

    def _connection(self) -> asyncpg.Connection:
        if self.conn is None:
            raise StoreError("Database connection is not initialized")
        return self.conn

    async def list_users(self) -> List[User]:
        rows = await self.fetch(SELECT_USERS)
        return [User(id=row["id"], name=row["name"], email=row["email"]) for row in rows]

    async def insert_user(self, name: str, email: str):
        await self.execute(INSERT_USER, name, email)

    async def update_user(self, user_id: int, name: str, email: str):
        # A missing id updates nothing and is not reported
        await self.execute(UPDATE_USER, name, email, user_id)

    async def delete_user(self, user_id: int):
        await self.execute(DELETE_USER, user_id)
