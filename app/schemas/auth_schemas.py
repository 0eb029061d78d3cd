from pydantic import AliasChoices, BaseModel, EmailStr, Field, field_validator


class LoginSchema(BaseModel):
    # "email" / "username" accepted for older clients
    identifier: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("identifier", "email", "username"),
    )
    password: str = Field(..., min_length=1)


class UserRegistrationSchema(BaseModel):
    username: str = Field(..., min_length=3, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    department: str | None = Field(None, max_length=100)
    academic_year: str | None = Field(None, max_length=50)

    @field_validator("username")
    def validate_username(cls, value):
        value = value.strip()
        if "@" in value:
            raise ValueError("Username must not contain '@'")
        if not value.replace("_", "").replace("-", "").replace(".", "").isalnum():
            raise ValueError("Username may only contain letters, digits, '.', '_' and '-'")
        return value

    @field_validator("email")
    def normalize_email(cls, value):
        return value.lower()


class JwtAuthenticationResponse(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "Bearer"
    expires_in_seconds: int
    user_id: int
    email: str
    role: str


class MessageResponse(BaseModel):
    message: str
