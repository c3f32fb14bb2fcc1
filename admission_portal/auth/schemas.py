from typing import Optional

from pydantic import BaseModel, EmailStr, Field, model_validator

UDISE_PATTERN = r"^[0-9A-Za-z]{11}$"


class SignupRequest(BaseModel):
    udise: str = Field(..., pattern=UDISE_PATTERN, description="11-character UDISE code")
    name: str = Field(..., min_length=1, max_length=255)
    address: str = Field(..., min_length=1)
    mobile: Optional[str] = Field(None, pattern=r"^\d{10}$")
    email: Optional[EmailStr] = None
    password: str = Field(..., min_length=6)
    confirm_password: str

    @model_validator(mode="after")
    def passwords_match(self) -> "SignupRequest":
        if self.password != self.confirm_password:
            raise ValueError("Passwords do not match")
        return self


class LoginRequest(BaseModel):
    """Log in with the school's UDISE code or its registered email."""

    login: str = Field(..., min_length=1, description="UDISE code or email")
    password: str = Field(..., min_length=1)


class SchoolInfo(BaseModel):
    udise: str
    name: str
    address: str
    mobile: Optional[str] = None
    email: Optional[str] = None

    class Config:
        from_attributes = True


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    school: SchoolInfo


class CurrentSchool(BaseModel):
    """Authenticated school context passed explicitly into every service call."""

    udise: str
    name: str
