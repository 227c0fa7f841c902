from abc import abstractmethod
from typing import Optional
import logging

from shopfront.models.user import User
from shopfront.repositories.base import BaseRepository, DynamoTable, InMemoryTable

logger = logging.getLogger(__name__)


class UserRepository(BaseRepository[User]):
    """Credential store for registered users"""

    @property
    def entity_name(self) -> str:
        return "User"

    @abstractmethod
    def find_by_username(self, username: str) -> Optional[User]:
        pass

    @abstractmethod
    def find_by_phone_number(self, phone_number: str) -> Optional[User]:
        pass


class DynamoUserRepository(UserRepository):
    """
    Users table keyed by id, with secondary indexes on username and
    phoneNumber for point lookups.
    """

    def __init__(
        self,
        client,
        table_name: str = "users",
        username_index: str = "UsernameIndex",
        phone_number_index: str = "PhoneNumberIndex",
    ):
        self.table = DynamoTable(client, table_name, self.entity_name)
        self.username_index = username_index
        self.phone_number_index = phone_number_index

    def create_if_absent(self, entity: User) -> None:
        self.table.put_if_absent(entity.to_item())

    def get_by_id(self, entity_id: str) -> Optional[User]:
        item = self.table.get(entity_id)
        return User.from_item(item) if item else None

    def find_by_username(self, username: str) -> Optional[User]:
        items = self.table.query_index(self.username_index, "username", username)
        return User.from_item(items[0]) if items else None

    def find_by_phone_number(self, phone_number: str) -> Optional[User]:
        items = self.table.query_index(self.phone_number_index, "phoneNumber", phone_number)
        return User.from_item(items[0]) if items else None


class InMemoryUserRepository(UserRepository):

    def __init__(self):
        self.table = InMemoryTable(self.entity_name)

    def create_if_absent(self, entity: User) -> None:
        self.table.put_if_absent(entity.to_item())

    def get_by_id(self, entity_id: str) -> Optional[User]:
        item = self.table.get(entity_id)
        return User.from_item(item) if item else None

    def find_by_username(self, username: str) -> Optional[User]:
        items = self.table.find_by("username", username)
        return User.from_item(items[0]) if items else None

    def find_by_phone_number(self, phone_number: str) -> Optional[User]:
        items = self.table.find_by("phoneNumber", phone_number)
        return User.from_item(items[0]) if items else None
