from fastapi import APIRouter, Depends
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from articlehub.database import get_db
from articlehub.exceptions import ConflictError
from articlehub.schemas import AuthResponse, LoginRequest, RegisterRequest
from articlehub.services import auth_service

router = APIRouter(prefix="/auth", tags=["auth"])

@router.post("/register", status_code=201, response_model=AuthResponse)
async def register(data: RegisterRequest, db: AsyncSession = Depends(get_db)):
    try:
        return await auth_service.register(db, data)
    except IntegrityError:
        # Lost a race with a concurrent registration for the same email.
        raise ConflictError("User with this email already exists")

@router.post("/login", response_model=AuthResponse)
async def login(data: LoginRequest, db: AsyncSession = Depends(get_db)):
    return await auth_service.login(db, data)
