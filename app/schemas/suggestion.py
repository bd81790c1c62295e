from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from app.core.regions import canonical_state
from app.schemas.rental import Frequency

PropertyType = Literal["apartment", "house", "shop", "office"]


class SuggestionRequest(BaseModel):
    """Body for POST /ai/suggest-rent. Accepts camelCase (wire) or snake_case keys."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, str_strip_whitespace=True)

    state: str
    property_type: PropertyType
    bedrooms: int = Field(ge=0)
    bathrooms: int = Field(ge=0)
    square_footage: int = Field(ge=1)
    description: str = Field(min_length=10)
    rental_type: Optional[Frequency] = None

    @field_validator("state")
    @classmethod
    def state_must_be_known(cls, v):
        canonical = canonical_state(v)
        if canonical is None:
            raise ValueError("State must be selected.")
        return canonical


class SuggestionResponse(BaseModel):
    """Structured output requested from the model and returned to the client."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    suggested_rental_amount: float = Field(
        description="The suggested rental amount as a plain number, without currency symbols or commas."
    )
    reasoning: str = Field(description="The reasoning behind the suggested rental amount.")
