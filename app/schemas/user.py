from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class LoginRequest(BaseModel):
    username: str = ""
    password: str = ""
    remember: bool = False


class SignupRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    username: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    full_name: Optional[str] = Field(default=None, alias="fullName")


class UserUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    user_id: int = Field(alias="userId")
    full_name: Optional[str] = Field(default=None, alias="fullName")
    email: Optional[str] = None
    username: Optional[str] = None
    role: Optional[str] = Field(default=None, validation_alias=AliasChoices("role", "userType"))
    is_active: Optional[bool] = Field(default=None, alias="isActive")
    password: Optional[str] = None


class UserDelete(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: int = Field(alias="userId")
