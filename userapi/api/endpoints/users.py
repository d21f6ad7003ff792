# api/endpoints/users.py
from typing import List

from fastapi import APIRouter, Depends, Request, Response, status

from userapi.api.models import User
from userapi.db.connection import Database

router = APIRouter()


def get_database(request: Request) -> Database:
    return request.app.state.database


@router.post("", response_model=List[User])
async def add_user(user: User, db: Database = Depends(get_database)):
    await db.insert_user(user.name, user.email)
    return await db.list_users()


@router.get("", response_model=List[User])
async def get_users(db: Database = Depends(get_database)):
    return await db.list_users()


@router.put("/{user_id}", response_model=List[User])
async def update_user(user_id: int, user: User, db: Database = Depends(get_database)):
    await db.update_user(user_id, user.name, user.email)
    return await db.list_users()


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(user_id: int, db: Database = Depends(get_database)):
    await db.delete_user(user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
