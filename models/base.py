from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class CamelDTO(BaseModel):
    """
    Base for DTOs that cross the wire or the Local Store.

    Python attributes are snake_case; JSON payloads use camelCase keys
    (``productId``, ``totalItems``), which is what the storefront API and
    the persisted local records use. Both spellings are accepted on input.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_payload(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")
