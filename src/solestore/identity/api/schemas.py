"""Pydantic request/response schemas for the Identity API."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

# --- Request Schemas ---


class AddressRequest(BaseModel):
    street: str = Field(..., max_length=255)
    city: str = Field(..., max_length=100)
    state: str = Field(..., max_length=100)
    postal_code: str = Field(..., max_length=20)
    country: str = Field(..., max_length=100)


class AddressUpdateRequest(BaseModel):
    street: str | None = Field(None, max_length=255)
    city: str | None = Field(None, max_length=100)
    state: str | None = Field(None, max_length=100)
    postal_code: str | None = Field(None, max_length=20)
    country: str | None = Field(None, max_length=100)


class RegisterRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "username": "jane",
                    "email": "jane@example.com",
                    "password": "Sneakers2024",
                    "phone_number": "+1 (555) 010-2030",
                    "address": {
                        "street": "12 Market St",
                        "city": "Springfield",
                        "state": "IL",
                        "postal_code": "62701",
                        "country": "USA",
                    },
                }
            ]
        }
    }

    username: str = Field(..., max_length=50)
    email: str = Field(..., max_length=254)
    password: str = Field(..., max_length=128)
    phone_number: str = Field(..., max_length=20)
    address: AddressRequest


class LoginRequest(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"email": "jane@example.com", "password": "Sneakers2024"}]}}

    email: str = Field(..., max_length=254)
    password: str = Field(..., max_length=128)


class UpdateUserRequest(BaseModel):
    """Partial update. `role` is honoured for administrators only."""

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "username": "jane.doe",
                    "phone_number": "555-010-9999",
                    "address": {"city": "Chicago"},
                }
            ]
        }
    }

    username: str | None = Field(None, max_length=50)
    email: str | None = Field(None, max_length=254)
    password: str | None = Field(None, max_length=128)
    phone_number: str | None = Field(None, max_length=20)
    address: AddressUpdateRequest | None = None
    role: str | None = Field(None, max_length=10)


class ChangePasswordRequest(BaseModel):
    model_config = {
        "json_schema_extra": {"examples": [{"current_password": "Sneakers2024", "new_password": "Trainers2025"}]}
    }

    current_password: str | None = Field(None, max_length=128)
    new_password: str = Field(..., max_length=128)


# --- Response Schemas ---


class UserResponse(BaseModel):
    id: str
    username: str
    email: str
    phone_number: str
    address: dict | None = None
    role: str
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_user(cls, user) -> UserResponse:
        return cls(
            id=str(user.id),
            username=user.username,
            email=user.email,
            phone_number=user.phone_number,
            address=user.address.to_dict() if user.address else None,
            role=user.role,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


class SessionResponse(BaseModel):
    message: str
    user: UserResponse
    token: str


class UserListResponse(BaseModel):
    users: list[UserResponse]
    pagination: dict


class MessageResponse(BaseModel):
    message: str
