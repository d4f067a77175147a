from pydantic import BaseModel, ConfigDict


class Token(BaseModel):
    access_token: str
    token_type: str


class AccountInfo(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str


class PasswordChange(BaseModel):
    current_password: str
    new_password: str
    confirm_password: str
