"""
AI routes: rent suggestion via LangChain + OpenAI.

- POST /ai/suggest-rent: property details in, suggested amount + reasoning out.
- GET /ai/status: whether suggestions are enabled, so the UI can hide the button.
"""
from fastapi import APIRouter, Depends

from app.api.deps import get_rent_advisor
from app.core.auth import User, get_current_user
from app.schemas.suggestion import SuggestionRequest, SuggestionResponse
from app.services.rent_advisor import RentAdvisor

router = APIRouter(prefix="/ai", tags=["ai"])


@router.get("/status")
def ai_status(advisor: RentAdvisor = Depends(get_rent_advisor)):
    return {"suggestions_enabled": advisor.available}


@router.post("/suggest-rent", response_model=SuggestionResponse)
def suggest_rent(
    body: SuggestionRequest,
    advisor: RentAdvisor = Depends(get_rent_advisor),
    current_user: User = Depends(get_current_user),
):
    """
    Suggest a rent for a property.

    - **Authenticated users**: any logged-in user can call this.
    - **Body**: `{ "state", "propertyType", "bedrooms", "bathrooms", "squareFootage", "description" }`
      plus an optional `rentalType`.
    - **Returns**: `{ "suggestedRentalAmount": number, "reasoning": string }`.
    - 503 when suggestions are disabled or OPENAI_API_KEY is missing; 502 when the model call fails.
    """
    return advisor.suggest(body)
