"""User routes: registration, login, current user, logout.

Successful registration and login return the new token in the ``x-auth``
response header.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status

from api.dependencies import get_token_engine, get_user_repo
from api.models import LoginRequest, RegisterRequest, UserResponse
from api.security import AUTH_HEADER, AuthContext, get_current_user_required
from domain.model.errors import DuplicateError, InvalidCredentialsError, ValidationError
from port.user_repository import UserRepository
from services import auth_service
from services.auth_service import TokenEngine

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])


@router.post("", response_model=UserResponse)
async def register(
    request: RegisterRequest,
    response: Response,
    repo: UserRepository = Depends(get_user_repo),
    engine: TokenEngine = Depends(get_token_engine),
):
    """Register a new user and return its first token.

    Raises:
        HTTPException: 400 if validation fails or the email is taken
    """
    try:
        user, token = auth_service.register(repo, engine, request.email, request.password)
    except (ValidationError, DuplicateError) as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    response.headers[AUTH_HEADER] = token
    return UserResponse.from_domain(user)


@router.post("/login", response_model=UserResponse)
async def login(
    request: LoginRequest,
    response: Response,
    repo: UserRepository = Depends(get_user_repo),
    engine: TokenEngine = Depends(get_token_engine),
):
    """Login with email and password.

    Raises:
        HTTPException: 400 if credentials are invalid
    """
    try:
        user, token = auth_service.authenticate(repo, engine, request.email, request.password)
    except InvalidCredentialsError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    response.headers[AUTH_HEADER] = token
    return UserResponse.from_domain(user)


@router.get("/me", response_model=UserResponse)
async def get_me(auth: AuthContext = Depends(get_current_user_required)):
    return UserResponse.from_domain(auth.user)


@router.delete("/me/token")
async def logout(
    auth: AuthContext = Depends(get_current_user_required),
    repo: UserRepository = Depends(get_user_repo),
):
    """Revoke the token used for this request. Other sessions stay valid."""
    auth_service.logout(repo, auth.user_id, auth.token)
    return {"message": "Logged out"}
