"""
Rent suggestion via LangChain + OpenAI.

The model is a black box: we fill a fixed prompt with the property details,
ask for structured output, and map any failure to SuggestionFailed. Input is
validated before the model is called, so an incomplete request never leaves
the process.
"""
import logging
from typing import Any, List, Optional

from langchain_core.messages import BaseMessage, HumanMessage, SystemMessage
from langchain_openai import ChatOpenAI

from app.core.config import Settings
from app.core.errors import SuggestionFailed, SuggestionUnavailable
from app.schemas.suggestion import SuggestionRequest, SuggestionResponse
from app.services.validation import validate_suggestion_request

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = "You are an expert real estate analyst specializing in rental property valuation."

SUGGESTION_PROMPT = """Based on the following property details, suggest a competitive monthly rental amount in USD and provide a brief reasoning for your suggestion.

State: {state}
Property Type: {property_type}
Bedrooms: {bedrooms}
Bathrooms: {bathrooms}
Square Footage: {square_footage}
Description: {description}
{rental_type_line}
Consider recent rental trends, comparable properties, and the overall condition and amenities of the property.
The suggestedRentalAmount should be a number (do not include currency symbols or commas), and the reasoning should be clear and concise."""

FAILED_MESSAGE = "Failed to get rental suggestion. Please try again."


def build_messages(request: SuggestionRequest) -> List[BaseMessage]:
    rental_type_line = f"Rental Type: {request.rental_type}\n" if request.rental_type else ""
    prompt = SUGGESTION_PROMPT.format(
        state=request.state,
        property_type=request.property_type,
        bedrooms=request.bedrooms,
        bathrooms=request.bathrooms,
        square_footage=request.square_footage,
        description=request.description,
        rental_type_line=rental_type_line,
    )
    return [SystemMessage(content=SYSTEM_PROMPT), HumanMessage(content=prompt)]


class RentAdvisor:
    def __init__(self, llm: Optional[Any] = None, enabled: bool = True):
        self.llm = llm
        self.enabled = enabled

    @classmethod
    def from_settings(cls, settings: Settings) -> "RentAdvisor":
        llm = None
        if settings.suggestions_available:
            llm = ChatOpenAI(
                model=settings.OPENAI_MODEL,
                api_key=settings.OPENAI_API_KEY,
                max_tokens=512,
            )
        return cls(llm=llm, enabled=settings.SUGGESTIONS_ENABLED)

    @property
    def available(self) -> bool:
        return self.enabled and self.llm is not None

    def suggest(self, data) -> SuggestionResponse:
        request = validate_suggestion_request(data)

        if not self.available:
            raise SuggestionUnavailable(
                "Rent suggestions are not configured. Set OPENAI_API_KEY in .env."
            )

        try:
            structured = self.llm.with_structured_output(SuggestionResponse)
            result = structured.invoke(build_messages(request))
        except Exception as e:
            logger.exception("Error suggesting rental amount")
            raise SuggestionFailed(FAILED_MESSAGE) from e

        if isinstance(result, dict):
            try:
                result = SuggestionResponse.model_validate(result)
            except ValueError as e:
                logger.warning("Incomplete rental suggestion: %s", e)
                raise SuggestionFailed(FAILED_MESSAGE) from e

        if (
            not isinstance(result, SuggestionResponse)
            or result.suggested_rental_amount < 0
            or not result.reasoning.strip()
        ):
            logger.warning("Unusable rental suggestion returned: %r", result)
            raise SuggestionFailed(FAILED_MESSAGE)

        logger.info(
            "Suggested rent %.2f for %s %s",
            result.suggested_rental_amount,
            request.property_type,
            request.state,
        )
        return result
