from models.base_model import Base, BaseModel
from sqlalchemy import Column, String
from sqlalchemy.orm import validates

from utils.security import hash_password


class User(BaseModel, Base):
    __tablename__ = "users"
    user_name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)

    @validates("email")
    def _normalize_email(self, key, value):
        return value.strip().lower() if isinstance(value, str) else value

    @property
    def password(self):
        raise AttributeError("Password: Write-only field")

    @password.setter
    def password(self, plaintext: str):
        # only the argon2 hash is ever stored
        self.password_hash = hash_password(plaintext)

    def __repr__(self):
        return f"<User email={self.email}>"
