from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base schema: snake_case in Python, camelCase on the wire."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True
        use_enum_values = True
        validate_default = True


class DeleteResult(CamelModel):
    success: bool = True
    message: str


class BulkDeleteResult(DeleteResult):
    deleted_count: int
