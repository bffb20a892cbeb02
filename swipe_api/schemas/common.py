from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, StringConstraints
from pydantic.alias_generators import to_camel

AnswerValue = Literal["yes", "no"]

# matches the width of the id columns in swipe_api.models
IDENTIFIER_MAX_LENGTH = 128

Identifier = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=IDENTIFIER_MAX_LENGTH)]


class CamelModel(BaseModel):
    """Snake_case in Python, camelCase on the wire."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SuccessResponse(CamelModel):
    success: bool = True


class ErrorResponse(CamelModel):
    success: bool = False
    error: str
