"""Request models for search calls."""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class SearchType(str, Enum):
    """Strategy used to answer a query."""

    EXACT = "exact"
    PREFIX = "prefix"
    STARTS_WITH = "startsWith"
    CONTAINS = "contains"
    FUZZY = "fuzzy"


_SEARCH_TYPE_ALIASES = {
    member.value.lower().replace("_", ""): member for member in SearchType
}


class SearchOptions(BaseModel):
    """Per-call search options. Unset values fall back to the index defaults."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    search_type: SearchType = Field(
        default=SearchType.CONTAINS, description="Search strategy"
    )
    max_results: Optional[int] = Field(
        None, ge=1, description="Maximum number of results to return"
    )
    fuzzy_threshold: Optional[float] = Field(
        None, ge=0.0, le=1.0, description="Minimum similarity for fuzzy matches"
    )
    enable_fuzzy: Optional[bool] = Field(
        None, description="Append fuzzy matches when the primary strategy finds few results"
    )
    include_suggestions: bool = Field(
        default=False, description="Attach spelling suggestions to empty results"
    )

    @field_validator("search_type", mode="before")
    @classmethod
    def validate_search_type(cls, v: Any) -> Any:
        """Accept search types case-insensitively, with or without underscores."""
        if isinstance(v, str) and not isinstance(v, SearchType):
            member = _SEARCH_TYPE_ALIASES.get(v.lower().replace("_", ""))
            if member is None:
                raise ValueError(
                    "search_type must be one of: "
                    + ", ".join(member.value for member in SearchType)
                )
            return member
        return v

    @property
    def is_prefix(self) -> bool:
        return self.search_type in (SearchType.PREFIX, SearchType.STARTS_WITH)
