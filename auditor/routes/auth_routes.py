"""Authentication API routes."""

from fastapi import APIRouter, Depends, status

from auditor.auth import get_current_user
from auditor.nonce import create_nonce
from auditor.repositories.user_repository import User
from auditor.schemas.auth import (
    RegisterRequest,
    RegisterResponse,
    LoginRequest,
    LoginResponse,
    NonceResponse
)
from auditor.services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
async def register(request: RegisterRequest):
    """
    Register a new user account.

    Parameters:
        - username: Unique username (must not already exist)
        - password: User password (will be hashed before storage)

    Returns:
        - api_key: Generated API Key with 'pda_' prefix
        - user_id: UUID of created user
        - is_network_admin: True for the first account of the network

    Raises:
        - 400: Username already exists
    """
    auth_service = AuthService()
    api_key, user_id = auth_service.register_user(request.username, request.password)
    user = auth_service.user_repo.get_by_username(request.username)

    return RegisterResponse(
        api_key=api_key,
        user_id=user_id,
        is_network_admin=bool(user and user.is_network_admin),
    )


@router.post("/login", response_model=LoginResponse)
async def login(request: LoginRequest):
    """
    Authenticate user and generate new API Key.

    Parameters:
        - username: User's username
        - password: User's password

    Returns:
        - api_key: New API Key (replaces previous key and invalidates its nonces)

    Raises:
        - 401: Invalid credentials
    """
    auth_service = AuthService()
    api_key = auth_service.login_user(request.username, request.password)

    return LoginResponse(api_key=api_key)


@router.get("/nonce", response_model=NonceResponse)
async def issue_nonce(current_user: User = Depends(get_current_user)):
    """
    Issue the security token that inventory requests must carry.

    Returns:
        - nonce: Token bound to the caller's API key

    Raises:
        - 401: Invalid or missing API Key
    """
    return NonceResponse(nonce=create_nonce(current_user))
