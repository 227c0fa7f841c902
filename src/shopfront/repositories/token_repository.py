from typing import Optional

from shopfront.models.user import AuthToken
from shopfront.repositories.base import BaseRepository, DynamoTable, InMemoryTable


class TokenRepository(BaseRepository[AuthToken]):
    """Issued tokens; rows are only ever inserted"""

    @property
    def entity_name(self) -> str:
        return "AuthToken"


class DynamoTokenRepository(TokenRepository):

    def __init__(self, client, table_name: str = "auth_tokens"):
        self.table = DynamoTable(client, table_name, self.entity_name)

    def create_if_absent(self, entity: AuthToken) -> None:
        self.table.put_if_absent(entity.to_item())

    def get_by_id(self, entity_id: str) -> Optional[AuthToken]:
        item = self.table.get(entity_id)
        return AuthToken.from_item(item) if item else None


class InMemoryTokenRepository(TokenRepository):

    def __init__(self):
        self.table = InMemoryTable(self.entity_name)

    def create_if_absent(self, entity: AuthToken) -> None:
        self.table.put_if_absent(entity.to_item())

    def get_by_id(self, entity_id: str) -> Optional[AuthToken]:
        item = self.table.get(entity_id)
        return AuthToken.from_item(item) if item else None
