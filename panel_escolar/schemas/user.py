import re
from enum import Enum
from pydantic import Field, ValidationInfo, field_validator
from typing import Optional
from datetime import datetime

from .common import CamelModel

# email-validator no forma parte de las dependencias
EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"
PHONE_PATTERN = re.compile(r"^\+?\d{7,14}$")
PASSWORD_RULES = (
    (re.compile(r"[A-Z]"), "La contraseña debe contener al menos una mayúscula"),
    (re.compile(r"[a-z]"), "La contraseña debe contener al menos una minúscula"),
    (re.compile(r"[0-9]"), "La contraseña debe contener al menos un número"),
    (
        re.compile(r"[!@#$%^&*]"),
        "La contraseña debe contener al menos un carácter especial (!@#$%^&*)",
    ),
)


class Gender(str, Enum):
    MALE = "M"
    FEMALE = "F"
    OTHER = "O"


def _check_phone(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    if not PHONE_PATTERN.match(value):
        raise ValueError("El teléfono debe tener entre 7 y 14 dígitos, con o sin +")
    return value


class UserBase(CamelModel):
    email: str = Field(pattern=EMAIL_PATTERN)
    username: str = Field(min_length=3, max_length=20, pattern=r"^[a-zA-Z0-9_-]+$")
    given_names: str = Field(min_length=2, max_length=50)
    last_names: str = Field(min_length=2, max_length=50)
    dpi: str = Field(pattern=r"^\d{13}$")
    phone: Optional[str] = None
    gender: Gender
    role_id: int = Field(gt=0)
    is_active: bool = True
    can_access_platform: bool = False

    @field_validator("email")
    @classmethod
    def lower_email(cls, value: str) -> str:
        return value.lower()

    @field_validator("phone")
    @classmethod
    def check_phone(cls, value: Optional[str]) -> Optional[str]:
        return _check_phone(value)

    @property
    def full_name(self) -> str:
        return f"{self.given_names} {self.last_names}".strip()


class UserCreate(UserBase):
    password: str = Field(min_length=8)
    confirm_password: str = Field(exclude=True)

    @field_validator("password")
    @classmethod
    def check_password(cls, value: str) -> str:
        for pattern, message in PASSWORD_RULES:
            if not pattern.search(value):
                raise ValueError(message)
        return value

    @field_validator("confirm_password")
    @classmethod
    def check_confirmation(cls, value: str, info: ValidationInfo) -> str:
        password = info.data.get("password")
        if password is not None and value != password:
            raise ValueError("Las contraseñas no coinciden")
        return value


class UserUpdate(CamelModel):
    email: Optional[str] = Field(default=None, pattern=EMAIL_PATTERN)
    given_names: Optional[str] = Field(default=None, min_length=2, max_length=50)
    last_names: Optional[str] = Field(default=None, min_length=2, max_length=50)
    dpi: Optional[str] = Field(default=None, pattern=r"^\d{13}$")
    phone: Optional[str] = None
    gender: Optional[Gender] = None
    role_id: Optional[int] = Field(default=None, gt=0)
    is_active: Optional[bool] = None
    can_access_platform: Optional[bool] = None

    @field_validator("phone")
    @classmethod
    def check_phone(cls, value: Optional[str]) -> Optional[str]:
        return _check_phone(value)


class User(UserBase):
    id: int
    # el backend devuelve usuarios sin todos los campos obligatorios del alta
    username: Optional[str] = None
    dpi: Optional[str] = None
    gender: Optional[Gender] = None
    role_id: Optional[int] = None
    is_email_verified: bool = False
    deleted_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class UserStats(CamelModel):
    total: int = 0
    active: int = 0
    inactive: int = 0
    with_platform_access: int = 0
