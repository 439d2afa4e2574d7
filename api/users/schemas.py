"""
User API schemas (request/response models).

Bodies accept snake_case field names or the camelCase names the frontend
sends (`firstName`, `lastName`); responses are serialized with camelCase.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from .entity import User

EMAIL_PATTERN = r"^\S+@\S+\.\S+$"


class UserPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    username: str = Field(..., min_length=3, max_length=50)
    email: str = Field(..., min_length=3, max_length=320, pattern=EMAIL_PATTERN)
    first_name: str | None = Field(default=None, max_length=100, alias="firstName")
    last_name: str | None = Field(default=None, max_length=100, alias="lastName")
    active: bool = True


class UserCreateRequest(UserPayload):
    password: str | None = Field(default=None, min_length=6, max_length=128)

    def to_user(self) -> User:
        return User(
            username=self.username,
            email=self.email,
            password=self.password,
            first_name=self.first_name,
            last_name=self.last_name,
            active=self.active,
        )


class UserUpdateRequest(UserPayload):
    # Password is not part of the replacement payload.

    def to_user(self) -> User:
        return User(
            username=self.username,
            email=self.email,
            first_name=self.first_name,
            last_name=self.last_name,
            active=self.active,
        )


class UserResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    username: str
    email: str
    first_name: str | None = Field(default=None, alias="firstName")
    last_name: str | None = Field(default=None, alias="lastName")
    active: bool
    created_at: datetime | None = Field(default=None, alias="createdAt")
    updated_at: datetime | None = Field(default=None, alias="updatedAt")


class UserCountResponse(BaseModel):
    active: bool
    count: int
