"""Record stored for every indexed string."""

from typing import Any

from pydantic import BaseModel, Field


class IndexedItem(BaseModel):
    """A caller record together with its normalized search key."""

    key: str = Field(..., description="Lower-cased search key")
    id: str = Field(..., description="Stable identifier, falls back to the key")
    payload: Any = Field(None, description="Caller record, opaque to the index")
    frequency: int = Field(default=0, ge=0, description="Times this exact key was inserted")
