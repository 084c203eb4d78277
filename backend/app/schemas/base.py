"""
Base schemas with standardized field naming and timestamp encoding.
"""
from datetime import date, datetime
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, PlainSerializer
from pydantic.alias_generators import to_camel

from ..core.constants import DATE_FORMAT, DATETIME_FORMAT


class StandardizedModel(BaseModel):  # type: ignore[misc]
    """Base model with camelCase wire names; snake_case stays accepted on input."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
    )


def parse_local_datetime(value: Any) -> Any:
    """Parse ``yyyy-MM-ddTHH:mm:ss`` strings; other values pass through to pydantic."""
    if isinstance(value, str):
        try:
            return datetime.strptime(value.strip(), DATETIME_FORMAT)
        except ValueError:
            raise ValueError(f"must use the format {DATETIME_FORMAT}") from None
    return value


LocalDateTime = Annotated[
    datetime,
    PlainSerializer(lambda v: v.strftime(DATETIME_FORMAT), return_type=str, when_used="json"),
]

LocalDate = Annotated[
    date,
    PlainSerializer(lambda v: v.strftime(DATE_FORMAT), return_type=str, when_used="json"),
]
