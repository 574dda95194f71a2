from pydantic import BaseModel, Field

# ---------- Inputs ----------

class SignInIn(BaseModel):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)

class SignUpIn(BaseModel):
    username: str = Field(min_length=3, max_length=64)
    password: str = Field(min_length=8, max_length=128)
    is_admin: bool = False
