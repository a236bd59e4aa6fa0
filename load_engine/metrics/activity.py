"""Activity input model.

An activity is one completed workout as synced from Strava, already
deduplicated and unit-normalized by the ingestion layer. The engine treats it
as immutable input.

Sensor data is exposed per channel: ``heart_rate``, ``power`` and ``pace``
each return a small frozen value object or ``None`` when the channel is
unavailable. Load calculation branches on these channels, never on raw field
truthiness.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import UTC, date, datetime
from enum import StrEnum
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, ConfigDict, field_validator


class SportCategory(StrEnum):
    """Coarse sport grouping used for thresholds and fallbacks."""

    RUN = "run"
    RIDE = "ride"
    SWIM = "swim"
    STRENGTH = "strength"
    OTHER = "other"


# Keys are Strava sport types lowercased with spaces/underscores removed
SPORT_CATEGORIES: dict[str, SportCategory] = {
    "run": SportCategory.RUN,
    "trailrun": SportCategory.RUN,
    "virtualrun": SportCategory.RUN,
    "ride": SportCategory.RIDE,
    "virtualride": SportCategory.RIDE,
    "ebikeride": SportCategory.RIDE,
    "mountainbikeride": SportCategory.RIDE,
    "gravelride": SportCategory.RIDE,
    "swim": SportCategory.SWIM,
    "weighttraining": SportCategory.STRENGTH,
    "workout": SportCategory.STRENGTH,
    "crossfit": SportCategory.STRENGTH,
}

# Slower than 20:00/km is a GPS dropout or an unrecorded treadmill distance
MAX_PLAUSIBLE_PACE_S_PER_KM = 1200.0

_NUMERIC_FIELDS = (
    "distance",
    "moving_time",
    "elapsed_time",
    "average_heartrate",
    "max_heartrate",
    "average_watts",
    "max_watts",
    "weighted_average_watts",
    "average_speed",
    "total_elevation_gain",
)


def normalize_sport_type(sport_type: str) -> str:
    """Normalize a Strava sport type for table lookups ("Trail Run" -> "trailrun")."""
    return sport_type.lower().replace(" ", "").replace("_", "")


def _sanitize_number(value: object) -> float | None:
    """Coerce a raw numeric field, mapping anything unusable to None."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number) or number < 0:
        return None
    return number


def _parse_zone(tz_name: str | None) -> ZoneInfo | None:
    """Parse an IANA zone, accepting Strava's "(GMT-08:00) America/Los_Angeles" form."""
    if not tz_name:
        return None
    candidate = tz_name.strip().split(" ")[-1]
    try:
        return ZoneInfo(candidate)
    except (ZoneInfoNotFoundError, ValueError, OSError):
        return None


@dataclass(frozen=True)
class HeartRateChannel:
    """Heart rate data of one activity (bpm)."""

    average: float
    maximum: float | None


@dataclass(frozen=True)
class PowerChannel:
    """Power data of one activity (watts).

    ``weighted`` is the device-reported normalized power when available.
    """

    average: float
    weighted: float | None
    maximum: float | None


@dataclass(frozen=True)
class PaceChannel:
    """Running pace of one activity.

    Attributes:
        seconds_per_km: Average moving pace
        elevation_per_km: Elevation gain in meters per kilometer (0 if unknown)
    """

    seconds_per_km: float
    elevation_per_km: float


class Activity(BaseModel):
    """One completed workout.

    Numeric fields that are non-numeric, non-finite or negative are treated as
    absent (``None``) at construction time, so one corrupt record falls back
    to the next calculation tier instead of poisoning an entire history.

    Attributes:
        id: Source identifier (Strava activity id)
        name: Activity title
        sport_type: Strava sport type (e.g. "Run", "Ride", "WeightTraining")
        start_date: Start timestamp (UTC)
        start_date_local: Start timestamp as wall-clock time in the athlete's zone
        timezone: IANA zone name (Strava's "(GMT+01:00) Europe/Paris" also accepted)
        distance: Distance in meters
        moving_time: Moving duration in seconds
        elapsed_time: Elapsed duration in seconds
        average_heartrate: Average heart rate in bpm
        max_heartrate: Maximum heart rate in bpm
        average_watts: Average power in watts
        max_watts: Maximum power in watts
        weighted_average_watts: Normalized power in watts
        average_speed: Average speed in m/s
        total_elevation_gain: Elevation gain in meters
        perceived_exertion: Session RPE on a 1-10 scale
    """

    model_config = ConfigDict(frozen=True)

    id: str | int | None = None
    name: str = ""
    sport_type: str = "Workout"
    start_date: datetime
    start_date_local: datetime | None = None
    timezone: str | None = None
    distance: float | None = None
    moving_time: float | None = None
    elapsed_time: float | None = None
    average_heartrate: float | None = None
    max_heartrate: float | None = None
    average_watts: float | None = None
    max_watts: float | None = None
    weighted_average_watts: float | None = None
    average_speed: float | None = None
    total_elevation_gain: float | None = None
    perceived_exertion: float | None = None

    @field_validator(*_NUMERIC_FIELDS, mode="before")
    @classmethod
    def sanitize_numeric(cls, value: object) -> float | None:
        """Treat malformed numeric fields as absent."""
        return _sanitize_number(value)

    @field_validator("perceived_exertion", mode="before")
    @classmethod
    def sanitize_rpe(cls, value: object) -> float | None:
        """Keep RPE only when it is on the 1-10 scale."""
        rpe = _sanitize_number(value)
        if rpe is None or not 1 <= rpe <= 10:
            return None
        return rpe

    @field_validator("start_date")
    @classmethod
    def ensure_aware(cls, value: datetime) -> datetime:
        """Naive start timestamps are interpreted as UTC."""
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value

    @property
    def category(self) -> SportCategory:
        return SPORT_CATEGORIES.get(normalize_sport_type(self.sport_type), SportCategory.OTHER)

    @property
    def moving_duration(self) -> float:
        """Moving time in seconds, falling back to elapsed time only when moving time is missing."""
        if self.moving_time is not None:
            return self.moving_time
        if self.elapsed_time:
            return self.elapsed_time
        return 0.0

    @property
    def local_date(self) -> date:
        """Calendar day the activity belongs to, in the athlete's local time."""
        if self.start_date_local is not None:
            return self.start_date_local.date()
        zone = _parse_zone(self.timezone)
        if zone is not None:
            return self.start_date.astimezone(zone).date()
        return self.start_date.date()

    @property
    def heart_rate(self) -> HeartRateChannel | None:
        if not self.average_heartrate:
            return None
        return HeartRateChannel(average=self.average_heartrate, maximum=self.max_heartrate or None)

    @property
    def power(self) -> PowerChannel | None:
        average = self.average_watts or self.weighted_average_watts
        if not average:
            return None
        return PowerChannel(
            average=average,
            weighted=self.weighted_average_watts or None,
            maximum=self.max_watts or None,
        )

    @property
    def pace(self) -> PaceChannel | None:
        """Running pace, available only for run-category activities with a plausible pace."""
        if self.category is not SportCategory.RUN:
            return None

        duration = self.moving_duration
        if self.distance and duration > 0:
            seconds_per_km = duration / (self.distance / 1000.0)
        elif self.average_speed:
            seconds_per_km = 1000.0 / self.average_speed
        else:
            return None

        if seconds_per_km > MAX_PLAUSIBLE_PACE_S_PER_KM:
            return None

        elevation_per_km = 0.0
        if self.total_elevation_gain and self.distance:
            elevation_per_km = self.total_elevation_gain / (self.distance / 1000.0)

        return PaceChannel(seconds_per_km=seconds_per_km, elevation_per_km=elevation_per_km)

    @property
    def has_heart_rate(self) -> bool:
        return self.heart_rate is not None

    @property
    def has_power(self) -> bool:
        return self.power is not None
