"""Weekly panel chart models."""

from datetime import date
from typing import Iterator

from pydantic import BaseModel, ConfigDict, Field

PLACEHOLDER = "-"
DRAW_WIDTH = 3

WEEKDAYS: tuple[str, ...] = (
    "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday",
)


class DayResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    open_digits: tuple[str, ...]
    close_digits: tuple[str, ...]
    jodi: str = PLACEHOLDER

    @classmethod
    def placeholder(cls) -> "DayResult":
        blank = (PLACEHOLDER,) * DRAW_WIDTH
        return cls(open_digits=blank, close_digits=blank, jodi=PLACEHOLDER)


class WeeklyBucket(BaseModel):
    """One Monday–Sunday row of the chart."""
    week_key: str                 # "01-04-2024 to 07-04-2024"
    week_start: date              # Monday, sort key
    week_end: date                # Sunday
    days: dict[str, DayResult] = Field(default_factory=dict)

    def cells(self) -> Iterator[tuple[str, DayResult]]:
        """Yield (weekday, result) Monday→Sunday, placeholders for missing days."""
        for day in WEEKDAYS:
            yield day, self.days.get(day) or DayResult.placeholder()

