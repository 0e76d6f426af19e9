from datetime import datetime
from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer
from pydantic.alias_generators import to_camel

from voicepos.core.dates import as_utc
from voicepos.db.base import MAX_DB_INT

# Decimal in Python, plain JSON number on the wire
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]

# SQLite returns naive datetimes; they are UTC
UtcDateTime = Annotated[
    datetime,
    PlainSerializer(lambda v: as_utc(v).isoformat(), return_type=str, when_used="json"),
]


class CamelModel(BaseModel):
    """snake_case attributes, camelCase JSON. Either spelling is accepted on input."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# Integers that end up in a database column; larger values are a 422, not a driver error
DbInt = Annotated[int, Field(ge=-MAX_DB_INT, le=MAX_DB_INT)]
