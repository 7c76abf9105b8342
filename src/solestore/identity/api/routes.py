"""FastAPI endpoints for accounts: sign-up, sessions, profiles and user admin."""

from fastapi import APIRouter, Depends, Request, Response
from protean.utils.globals import current_domain

from solestore.api.auth import authenticated, requires
from solestore.identity.access import Capability, Principal
from solestore.identity.api.schemas import (
    ChangePasswordRequest,
    LoginRequest,
    MessageResponse,
    RegisterRequest,
    SessionResponse,
    UpdateUserRequest,
    UserListResponse,
    UserResponse,
)
from solestore.identity.user.account import ChangePassword, DeleteUser, UpdateUser
from solestore.identity.user.authentication import authenticate
from solestore.identity.user.queries import get_user, list_users
from solestore.identity.user.registration import RegisterUser
from solestore.shared.pagination import resolve_page_size

auth_router = APIRouter(prefix="/auth", tags=["auth"])
user_router = APIRouter(prefix="/users", tags=["users"])


def _start_session(request: Request, response: Response, user, message: str) -> SessionResponse:
    """Issue a token for `user` and set it as the session cookie."""
    settings = request.app.state.settings
    tokens = request.app.state.tokens
    token = tokens.issue(user)
    response.set_cookie(
        key=settings.cookie_name,
        value=token,
        max_age=int(tokens.ttl.total_seconds()),
        httponly=True,
        secure=settings.cookie_secure,
        samesite="none" if settings.cookie_secure else "lax",
    )
    return SessionResponse(message=message, user=UserResponse.from_user(user), token=token)


def _update_command(request: Request, user_id: str, actor: Principal, body: UpdateUserRequest) -> UpdateUser:
    address = body.address.model_dump() if body.address else {}
    return UpdateUser(
        user_id=user_id,
        actor_id=actor.user_id,
        actor_role=actor.role,
        username=body.username,
        email=body.email,
        password=body.password,
        phone_number=body.phone_number,
        role=body.role,
        password_hash_iterations=request.app.state.settings.password_hash_iterations,
        **{field: value for field, value in address.items() if value is not None},
    )


# --- Session endpoints ---


@auth_router.post("/register", status_code=201, response_model=SessionResponse)
async def register(body: RegisterRequest, request: Request, response: Response) -> SessionResponse:
    command = RegisterUser(
        username=body.username,
        email=body.email,
        password=body.password,
        phone_number=body.phone_number,
        street=body.address.street,
        city=body.address.city,
        state=body.address.state,
        postal_code=body.address.postal_code,
        country=body.address.country,
        password_hash_iterations=request.app.state.settings.password_hash_iterations,
    )
    user_id = current_domain.process(command, asynchronous=False)
    return _start_session(request, response, get_user(user_id), "User registered successfully")


@auth_router.post("/login", response_model=SessionResponse)
async def login(body: LoginRequest, request: Request, response: Response) -> SessionResponse:
    user = authenticate(body.email, body.password)
    return _start_session(request, response, user, "Login successful")


@auth_router.post("/logout", response_model=MessageResponse)
async def logout(request: Request, response: Response) -> MessageResponse:
    settings = request.app.state.settings
    response.delete_cookie(settings.cookie_name, httponly=True, secure=settings.cookie_secure)
    return MessageResponse(message="Logout successful")


# --- Own account ---


@user_router.get("/profile", response_model=UserResponse)
async def get_profile(principal: Principal = Depends(authenticated)) -> UserResponse:
    return UserResponse.from_user(get_user(principal.user_id))


@user_router.put("/profile", response_model=UserResponse)
async def update_profile(
    body: UpdateUserRequest,
    request: Request,
    principal: Principal = Depends(authenticated),
) -> UserResponse:
    current_domain.process(_update_command(request, principal.user_id, principal, body), asynchronous=False)
    return UserResponse.from_user(get_user(principal.user_id))


@user_router.put("/change-password/{user_id}", response_model=MessageResponse)
async def change_password(
    user_id: str,
    body: ChangePasswordRequest,
    request: Request,
    principal: Principal = Depends(authenticated),
) -> MessageResponse:
    command = ChangePassword(
        user_id=user_id,
        actor_id=principal.user_id,
        actor_role=principal.role,
        current_password=body.current_password,
        new_password=body.new_password,
        password_hash_iterations=request.app.state.settings.password_hash_iterations,
    )
    current_domain.process(command, asynchronous=False)
    return MessageResponse(message="Password changed successfully")


# --- User administration ---


@user_router.get("/admin/all", response_model=UserListResponse)
async def list_all_users(
    request: Request,
    page: int = 1,
    limit: int | None = None,
    role: str | None = None,
    search: str | None = None,
    sort_by: str = "created_at",
    sort_order: str = "desc",
    principal: Principal = Depends(requires(Capability.MANAGE_USERS)),
) -> UserListResponse:
    settings = request.app.state.settings
    result = list_users(
        role=role,
        search=search,
        sort_by=sort_by,
        sort_order=sort_order,
        page=page,
        page_size=resolve_page_size(limit, settings.default_page_size, settings.max_page_size),
    )
    return UserListResponse(
        users=[UserResponse.from_user(user) for user in result.items],
        pagination=result.metadata(),
    )


@user_router.get("/admin/{user_id}", response_model=UserResponse)
async def get_user_details(
    user_id: str,
    principal: Principal = Depends(requires(Capability.MANAGE_USERS)),
) -> UserResponse:
    return UserResponse.from_user(get_user(user_id))


@user_router.put("/admin/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: str,
    body: UpdateUserRequest,
    request: Request,
    principal: Principal = Depends(requires(Capability.MANAGE_USERS)),
) -> UserResponse:
    current_domain.process(_update_command(request, user_id, principal, body), asynchronous=False)
    return UserResponse.from_user(get_user(user_id))


@user_router.delete("/admin/{user_id}", response_model=MessageResponse)
async def delete_user(
    user_id: str,
    principal: Principal = Depends(requires(Capability.MANAGE_USERS)),
) -> MessageResponse:
    command = DeleteUser(user_id=user_id, actor_id=principal.user_id, actor_role=principal.role)
    current_domain.process(command, asynchronous=False)
    return MessageResponse(message="User deleted successfully")
