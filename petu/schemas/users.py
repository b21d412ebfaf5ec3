from pydantic import BaseModel, EmailStr, Field


class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6, max_length=128)
    full_name: str = Field(min_length=1, max_length=120)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


class UserOut(BaseModel):
    id: int | str
    email: str
    full_name: str
    lives: int = 3
    reputation: int = 0
    level: str = "beginner"


class RegisterOut(BaseModel):
    success: bool = True
    user: UserOut


class LoginOut(BaseModel):
    success: bool = True
    user: UserOut
    token: str
