"""Base class for platform rows."""

from pydantic import BaseModel, ConfigDict

RowId = str | int


class Row(BaseModel):
    """A row as returned by the platform.

    The platform owns the schema, so unknown columns and embedded relations
    are passed through untouched.
    """

    model_config = ConfigDict(extra="allow")

    id: RowId
