from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from shared.config import TEAM_ENTITY_LABEL
from shared.exceptions import UnknownEntityType
from teams.models import Developer, Team, User


@dataclass(frozen=True)
class EntityTypeDefinition:
    id: str
    label: str
    model: Any

    @property
    def lowercase_label(self) -> str:
        return self.label.lower()


ENTITY_TYPES: Dict[str, EntityTypeDefinition] = {
    "team": EntityTypeDefinition(id="team", label=TEAM_ENTITY_LABEL, model=Team),
    "developer": EntityTypeDefinition(id="developer", label="Developer", model=Developer),
    "user": EntityTypeDefinition(id="user", label="User", model=User),
}


class EntityStorage:
    def __init__(self, db: Session, model):
        self.db = db
        self.model = model

    def load(self, entity_id) -> Optional[Any]:
        return self.db.get(self.model, entity_id)

    def load_by_properties(self, values: Dict[str, Any]) -> List[Any]:
        """
        Carrega as entidades cujas colunas são iguais aos valores informados,
        ordenadas pela chave primária.
        """
        query = self.db.query(self.model).filter_by(**values)
        return query.order_by(*self.model.__table__.primary_key.columns).all()


class EntityTypeManager:
    def __init__(self, db: Session, definitions: Optional[Dict[str, EntityTypeDefinition]] = None):
        self.db = db
        self.definitions = definitions if definitions is not None else ENTITY_TYPES

    def get_definition(self, entity_type_id: str) -> EntityTypeDefinition:
        try:
            return self.definitions[entity_type_id]
        except KeyError:
            raise UnknownEntityType(entity_type_id)

    def get_storage(self, entity_type_id: str) -> EntityStorage:
        return EntityStorage(self.db, self.get_definition(entity_type_id).model)
