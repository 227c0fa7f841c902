from dataclasses import dataclass
from typing import Optional, Dict, Any


@dataclass
class User:
    """Represents a registered user as stored in the users table"""
    id: str
    username: str
    phone_number: str
    dob: str  # ISO-8601 date of birth
    password_hash: str
    created_on: str

    def to_item(self) -> Dict[str, Any]:
        """Store representation (camelCase attribute names)"""
        return {
            "id": self.id,
            "username": self.username,
            "phoneNumber": self.phone_number,
            "dob": self.dob,
            "password": self.password_hash,
            "createdOn": self.created_on,
        }

    @classmethod
    def from_item(cls, item: Dict[str, Any]) -> "User":
        return cls(
            id=item["id"],
            username=item["username"],
            phone_number=item.get("phoneNumber", ""),
            dob=item.get("dob", ""),
            password_hash=item.get("password", ""),
            created_on=item.get("createdOn", ""),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Public representation; the password field is always nulled"""
        data = self.to_item()
        data["password"] = None
        return data


@dataclass
class AuthToken:
    """An issued bearer token, one row per successful signin"""
    id: str
    token: str
    user_id: str
    created_on: str
    username: Optional[str] = None  # not stored; convenience for responses

    def to_item(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "token": self.token,
            "userId": self.user_id,
            "createdOn": self.created_on,
        }

    @classmethod
    def from_item(cls, item: Dict[str, Any]) -> "AuthToken":
        return cls(
            id=item["id"],
            token=item["token"],
            user_id=item["userId"],
            created_on=item.get("createdOn", ""),
        )

    @property
    def authorization_header(self) -> str:
        return f"Bearer {self.token}"
