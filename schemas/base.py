"""
Schema Base

Shared pydantic configuration: camelCase on the wire, snake_case in Python.
"""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )

    def to_json(self):
        """Plain dict in wire format, ready for jsonify()."""
        return self.model_dump(mode='json', by_alias=True)


class InputModel(ApiModel):
    """Request bodies reject fields they do not know."""
    model_config = ConfigDict(extra='forbid')


def coerce_date(value):
    """Accept 'YYYY-MM-DD', ISO datetimes ('2025-01-06T00:00:00.000Z') and datetime objects."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, str) and 'T' in value:
        return value.split('T', 1)[0]
    return value


def parse_date(value):
    """Parse a query-string or JSON date into a date."""
    value = coerce_date(value)
    if isinstance(value, date):
        return value
    return date.fromisoformat(value)
