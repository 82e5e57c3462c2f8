from pydantic import BaseModel, constr


class RegisterRequest(BaseModel):
    name: constr(strip_whitespace=True, min_length=1, max_length=100)
    email: constr(strip_whitespace=True, pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$", max_length=255)
    password: constr(min_length=6, max_length=128)
    phone: constr(strip_whitespace=True, pattern=r"^\+?\d{7,15}$")


class LoginRequest(BaseModel):
    email: constr(strip_whitespace=True, min_length=1, max_length=255)
    password: constr(min_length=1, max_length=128)


class RefreshRequest(BaseModel):
    refresh_token: constr(min_length=1)
