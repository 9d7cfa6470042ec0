"""인증 라우터 — 로그인, 로그아웃, 등록, 비밀번호 변경, 현재 세션.

Auth Router — login, logout, self-registration, password change and
the current session.
"""

from typing import Annotated

from fastapi import APIRouter, Depends

from stationsync.api.deps import (
    get_auth_service,
    get_current_session,
    get_mutation_service,
    get_session_state,
)
from stationsync.schemas.auth import ChangePasswordRequest, LoginRequest
from stationsync.schemas.common import MessageResponse, RegisterRequest, Session
from stationsync.services.auth_service import AuthService
from stationsync.services.mutation_service import MutationService
from stationsync.services.session_state import SessionState

router: APIRouter = APIRouter()


@router.post("/login", response_model=Session)
async def login(
    data: LoginRequest,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
) -> Session:
    """로그인 — Start a session from the remote user directory."""
    return await auth_service.login(data.email, data.password)


@router.post("/logout", response_model=MessageResponse)
async def logout(
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
) -> dict:
    auth_service.logout()
    return {"message": "Logged out"}


@router.post("/register", response_model=MessageResponse, status_code=201)
async def register(
    data: RegisterRequest,
    mutations: Annotated[MutationService, Depends(get_mutation_service)],
) -> dict:
    """자가 등록 요청 — No session required."""
    await mutations.register_user(data)
    return {"message": "Registration submitted"}


@router.post("/change-password", response_model=Session)
async def change_password(
    data: ChangePasswordRequest,
    mutations: Annotated[MutationService, Depends(get_mutation_service)],
    state: Annotated[SessionState, Depends(get_session_state)],
) -> Session:
    """비밀번호 변경 — Returns the session with the forced-change flag cleared."""
    await mutations.change_password(data.new_password)
    return state.require()


@router.get("/me", response_model=Session)
async def me(
    session: Annotated[Session, Depends(get_current_session)],
) -> Session:
    return session
