"""Common base for API models: camelCase on the wire, snake_case in Python."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class APIModel(BaseModel):
    """Accepts either ``bookingDate`` or ``booking_date``; serializes as ``bookingDate``."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
