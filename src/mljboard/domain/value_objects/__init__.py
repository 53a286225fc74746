"""Domain value objects."""

from mljboard.domain.value_objects.scrobble_count import (
    ScrobbleCountResult,
    human_readable_result,
)
from mljboard.domain.value_objects.scrobble_range import (
    ONE_YEAR_SECONDS,
    AllTime,
    Bounded,
    Named,
    ScrobbleRange,
    is_unbounded,
    named_to_bounds,
    past_year,
    to_maloja_params,
)

__all__ = [
    "ONE_YEAR_SECONDS",
    "AllTime",
    "Bounded",
    "Named",
    "ScrobbleCountResult",
    "ScrobbleRange",
    "human_readable_result",
    "is_unbounded",
    "named_to_bounds",
    "past_year",
    "to_maloja_params",
]
