"""Summary table models produced by the aggregator."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class SummaryEntry(BaseModel):
    """One category's tally in a categorical table."""

    model_config = ConfigDict(frozen=True)

    name: str
    value: int = Field(default=0, ge=0)


class MonthlyEntry(BaseModel):
    """Registrations counted for one calendar month."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Month abbreviation, e.g. 'Jan'")
    registrations: int = Field(default=0, ge=0)


class AggregateResult(BaseModel):
    """The four summary tables shown on the dashboard.

    Serialized with camelCase keys to match the JSON the admin frontend reads.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    user_stats: tuple[SummaryEntry, ...] = Field(default=(), alias="userStats")
    registration_stats: tuple[MonthlyEntry, ...] = Field(
        default=(), alias="registrationStats"
    )
    gender_stats: tuple[SummaryEntry, ...] = Field(default=(), alias="genderStats")
    approval_stats: tuple[SummaryEntry, ...] = Field(
        default=(), alias="approvalStats"
    )

    @classmethod
    def empty(cls) -> AggregateResult:
        """Return the "no data yet" state."""
        return cls()

    @property
    def is_empty(self) -> bool:
        return not (
            self.user_stats
            or self.registration_stats
            or self.gender_stats
            or self.approval_stats
        )

    def to_payload(self) -> dict[str, list[dict[str, object]]]:
        """Return a JSON-ready dict keyed by the camelCase table names."""
        return self.model_dump(mode="json", by_alias=True)  # type: ignore[return-value]
