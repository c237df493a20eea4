from enum import Enum
from dataclasses import dataclass


class UserRole(Enum):
    ADMIN = "ADMIN"
    STAFF = "STAFF"


@dataclass
class User:
    user_id: str
    email: str
    name: str
    role: UserRole
    password: str
