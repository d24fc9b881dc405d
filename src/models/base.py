from pydantic import BaseModel, ConfigDict, model_validator
from pydantic.alias_generators import to_camel


class EntityModel(BaseModel):
    """Base for backend entity views: camelCase on the wire, unknown fields ignored."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data):
        # the backend sends null for unset fields; fall back to the field defaults
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data
