"""
Base model configuration
Records cross the API boundary with camelCase field names
(startTime, meetingUrl, entityId, ...) while Python code uses snake_case
"""

from pydantic import BaseModel as PydanticBaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class BaseModel(PydanticBaseModel):
    """Shared model base.

    - camelCase aliases generated from the snake_case field names
    - both spellings accepted on input
    - unknown fields rejected, so a typo in a form never passes silently
    - model_dump() emits camelCase unless by_alias=False is given
    """

    # See: <https://docs.pydantic.dev/2.10/concepts/alias/#using-an-aliasgenerator>
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )

    def model_dump(self, **kwargs):
        kwargs.setdefault("by_alias", True)
        return super().model_dump(**kwargs)
