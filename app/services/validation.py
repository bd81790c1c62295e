"""
Turns pydantic validation failures into the domain ValidationError.

Routes get pydantic's request validation for free; the store and the rent
advisor call these helpers directly so that raw mappings handed to them are
checked by exactly the same rules before anything is persisted or sent out.
"""
from typing import Any, Dict, Iterable, Type, TypeVar, Union

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from app.core.errors import ValidationError
from app.schemas.rental import RentalCreate, RentalUpdate
from app.schemas.suggestion import SuggestionRequest

M = TypeVar("M", bound=BaseModel)

FIELD_LABELS = {
    "shop_name": "Shop name",
    "tenant_name": "Tenant name",
    "state": "State",
    "rent_amount": "Rent amount",
    "due_date": "Due date",
    "property_type": "Property type",
    "propertyType": "Property type",
    "square_footage": "Square footage",
    "squareFootage": "Square footage",
    "description": "Description",
    "bedrooms": "Bedrooms",
    "bathrooms": "Bathrooms",
}


REQUEST_LOCATIONS = ("body", "query", "path", "header")


def field_errors(raw_errors: Iterable[dict]) -> Dict[str, str]:
    """Flatten pydantic errors to {field: first human-readable message}."""
    errors: Dict[str, str] = {}
    for err in raw_errors:
        loc = tuple(err.get("loc", ()))
        # FastAPI request errors are prefixed with where the value came from
        if loc and loc[0] in REQUEST_LOCATIONS:
            loc = loc[1:]
        field = ".".join(str(p) for p in loc) or "__root__"
        if field in errors:
            continue
        if err.get("type") == "missing":
            msg = f"{FIELD_LABELS.get(field, field)} is required."
        else:
            msg = str(err.get("msg", "Invalid value"))
            if msg.startswith("Value error, "):
                msg = msg[len("Value error, "):]
        errors[field] = msg
    return errors


def _validate(model: Type[M], data: Union[M, BaseModel, Dict[str, Any], None]) -> M:
    if isinstance(data, model):
        return data
    if data is None:
        raise ValidationError({"__root__": "No data supplied."})
    if isinstance(data, BaseModel):
        data = data.model_dump(exclude_unset=True, by_alias=False)
    try:
        return model.model_validate(data)
    except PydanticValidationError as exc:
        raise ValidationError(field_errors(exc.errors())) from exc


def validate_new_rental(data) -> RentalCreate:
    return _validate(RentalCreate, data)


def validate_rental_changes(data) -> RentalUpdate:
    return _validate(RentalUpdate, data)


def validate_suggestion_request(data) -> SuggestionRequest:
    return _validate(SuggestionRequest, data)
