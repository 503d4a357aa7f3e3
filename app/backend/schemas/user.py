from pydantic import BaseModel, ConfigDict


class CurrentUserRead(BaseModel):
    id: int
    username: str
    email: str
    display_name: str

    model_config = ConfigDict(from_attributes=True)


class AuthTokenModel(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    user: CurrentUserRead
