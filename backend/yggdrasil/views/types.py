"""Request bodies of the Yggdrasil endpoints, with their exact wire field names."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

MAX_EMAIL_LENGTH = 128
PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_LENGTH = 48


class _Body(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class Agent(_Body):
    name: Literal["Minecraft"]
    version: Literal[1] = 1


class AuthenticateRequest(_Body):
    username: str = Field(min_length=1, max_length=MAX_EMAIL_LENGTH)
    password: str = Field(min_length=PASSWORD_MIN_LENGTH, max_length=PASSWORD_MAX_LENGTH)
    client_token: str | None = Field(default=None, alias="clientToken")
    request_user: bool = Field(default=False, alias="requestUser")
    agent: Agent | None = None


class ProfileProperty(_Body):
    name: str
    value: str
    signature: str | None = None


class SelectedProfile(_Body):
    id: str
    name: str
    properties: list[ProfileProperty] = []


class RefreshRequest(_Body):
    access_token: str = Field(min_length=1, alias="accessToken")
    client_token: str | None = Field(default=None, alias="clientToken")
    request_user: bool = Field(default=False, alias="requestUser")
    selected_profile: SelectedProfile | None = Field(default=None, alias="selectedProfile")


class TokenRequest(_Body):
    """Body of validate and invalidate."""

    access_token: str = Field(min_length=1, alias="accessToken")
    client_token: str | None = Field(default=None, alias="clientToken")


class SignoutRequest(_Body):
    username: str = Field(min_length=1, max_length=MAX_EMAIL_LENGTH)
    password: str = Field(min_length=PASSWORD_MIN_LENGTH, max_length=PASSWORD_MAX_LENGTH)


class JoinRequest(_Body):
    access_token: str = Field(min_length=1, alias="accessToken")
    selected_profile: str = Field(min_length=1, alias="selectedProfile")
    server_id: str = Field(min_length=1, alias="serverId")


class HasJoinedQuery(_Body):
    username: str = Field(min_length=1)
    server_id: str = Field(min_length=1, alias="serverId")
    ip: str | None = None
