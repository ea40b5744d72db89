from pydantic import BaseModel, EmailStr, Field

from stayhub.models.enums import Role


class UserBootstrap(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    email: EmailStr
    role: Role = Role.HOST


class UserKeyOut(BaseModel):
    user_id: str
    role: Role
    api_key: str  # returned only once


class MeOut(BaseModel):
    user_id: str
    name: str
    email: EmailStr
    role: Role
    api_key_id: str
