"""
User record
"""
from dataclasses import dataclass
from typing import Dict, Any


@dataclass
class User:
    """An XO user account; ``id`` stays empty until the server assigns one"""
    id: str = ""
    email: str = ""
    password: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "User":
        return cls(
            id=data.get("id", ""),
            email=data.get("email", ""),
            password=data.get("password", ""),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "email": self.email, "password": self.password}
