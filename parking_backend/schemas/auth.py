from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class UserProfile(BaseModel):
    id: str
    email: Optional[str] = None
    email_verified: bool = False
    name: Optional[str] = None
    given_name: Optional[str] = None
    family_name: Optional[str] = None
    picture: Optional[str] = None
    locale: Optional[str] = None
    phone: Optional[str] = None
    provider: Optional[str] = None


class GoogleSignInRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id_token: Optional[str] = Field(default=None, alias="idToken")


class SyncProfileRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    access_token: Optional[str] = Field(default=None, alias="accessToken")


class RegisterProfileRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    access_token: Optional[str] = Field(default=None, alias="accessToken")
    first_name: Optional[str] = Field(default=None, alias="firstName")
    family_name: Optional[str] = Field(default=None, alias="familyName")
    phone: Optional[str] = None
    full_name: Optional[str] = Field(default=None, alias="fullName")


class AuthResponse(BaseModel):
    success: bool = True
    user: UserProfile
