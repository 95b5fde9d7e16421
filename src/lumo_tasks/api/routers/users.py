"""Routes for registration, login, the caller's profile and password recovery."""

from __future__ import annotations

from fastapi import APIRouter, status

from ...deps import AccountServiceDependency, CurrentActorDependency
from ...schemas import (
    ForgotPasswordRequest,
    LoginRequest,
    MessageResponse,
    ProfileResponse,
    ProfileUpdateRequest,
    RegistrationRequest,
    ResetPasswordRequest,
    TokenResponse,
)

router = APIRouter(prefix="/users", tags=["users"])


@router.post(
    "",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user with a default list",
)
async def register_user(
    payload: RegistrationRequest,
    service: AccountServiceDependency,
) -> MessageResponse:
    await service.register(payload)
    return MessageResponse(message="User registered successfully.")


@router.post("/login", response_model=TokenResponse, summary="Exchange credentials for a token")
async def login(payload: LoginRequest, service: AccountServiceDependency) -> TokenResponse:
    generated = await service.login(payload.email, payload.password)
    return TokenResponse(token=generated.token)


@router.get("/user-profile", response_model=ProfileResponse, summary="Read the caller's profile")
async def read_profile(
    actor: CurrentActorDependency,
    service: AccountServiceDependency,
) -> ProfileResponse:
    user = await service.get_profile(actor.id)
    return ProfileResponse.model_validate(user)


@router.put("/update-profile", response_model=ProfileResponse, summary="Update the caller's profile")
async def update_profile(
    payload: ProfileUpdateRequest,
    actor: CurrentActorDependency,
    service: AccountServiceDependency,
) -> ProfileResponse:
    user = await service.update_profile(actor.id, payload)
    return ProfileResponse.model_validate(user)


@router.delete(
    "/delete-user",
    response_model=MessageResponse,
    summary="Delete the caller with all of its lists and tasks",
)
async def delete_user(
    actor: CurrentActorDependency,
    service: AccountServiceDependency,
) -> MessageResponse:
    await service.delete_account(actor.id)
    return MessageResponse(message="User deleted successfully.")


@router.post(
    "/forgot-password",
    response_model=MessageResponse,
    summary="Email a password reset link",
)
async def forgot_password(
    payload: ForgotPasswordRequest,
    service: AccountServiceDependency,
) -> MessageResponse:
    await service.forgot_password(payload.email)
    return MessageResponse(message="Password reset email sent.")


@router.post(
    "/reset-password/{token}",
    response_model=MessageResponse,
    summary="Set a new password using a reset token",
)
async def reset_password(
    token: str,
    payload: ResetPasswordRequest,
    service: AccountServiceDependency,
) -> MessageResponse:
    await service.reset_password(token, payload)
    return MessageResponse(message="Password updated successfully.")
