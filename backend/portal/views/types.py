"""Request bodies of the portal API."""

from pydantic import BaseModel, ConfigDict, Field

from shared.auth.models import SkinModel, TextureKind

PROFILE_NAME_PATTERN = r"^[0-9a-zA-Z_]{1,32}$"


class Credentials(BaseModel):
    model_config = ConfigDict(extra="forbid")

    email: str = Field(min_length=3, max_length=128)
    password: str = Field(min_length=8, max_length=48)


class CreateProfileRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str = Field(pattern=PROFILE_NAME_PATTERN)


class RenameProfileRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    profile: str = Field(min_length=1)
    name: str = Field(pattern=PROFILE_NAME_PATTERN)


class DeleteProfileRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: str = Field(min_length=1)


class TexturePayload(BaseModel):
    type: TextureKind
    data: str  # base64 PNG; empty clears the texture
    model: SkinModel = SkinModel.DEFAULT


class TextureUploadRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    profile: str = Field(min_length=1)
    payload: TexturePayload
