from pydantic import BaseModel, Field, model_validator

class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"

class TokenPayload(BaseModel):
    sub: str | None = None
    role: str | None = None

class ChangePassword(BaseModel):
    current_password: str
    new_password: str = Field(..., min_length=6, max_length=72)

    @model_validator(mode="after")
    def check_passwords_differ(self):
        if self.current_password == self.new_password:
            raise ValueError("New password must be different from the current password")
        return self
