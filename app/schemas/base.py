from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Snake_case attributes, camelCase on the wire (firstName, companyHandle, ...)."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class StrictCamelModel(CamelModel):
    """Request body that rejects keys it does not declare."""

    class Config:
        extra = "forbid"
