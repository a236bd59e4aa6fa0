"""Athlete threshold schemas.

Thresholds are derived per call from the full activity history; a stored
profile can override any individual value. The engine never persists them.
"""

from pydantic import BaseModel, ConfigDict, Field

# Population placeholders used when history cannot support an estimate
DEFAULT_MAX_HEART_RATE = 190.0
DEFAULT_RESTING_HEART_RATE = 60.0
DEFAULT_THRESHOLD_HEART_RATE = 170.0
DEFAULT_THRESHOLD_PACE_S_PER_KM = 250.0  # 4.0 m/s
DEFAULT_FTP_WATTS = 0.0  # unset: power channel unavailable


class AthleteThresholds(BaseModel):
    """Per-athlete physiological reference points.

    Attributes:
        threshold_heart_rate: Functional threshold heart rate (bpm)
        threshold_pace: Functional threshold pace (seconds per km)
        functional_threshold_power: FTP in watts; 0 means unavailable
        max_heart_rate: Maximum heart rate (bpm)
        resting_heart_rate: Resting heart rate (bpm)
        defaulted_fields: Names of fields holding population defaults
    """

    model_config = ConfigDict(frozen=True)

    threshold_heart_rate: float = DEFAULT_THRESHOLD_HEART_RATE
    threshold_pace: float = DEFAULT_THRESHOLD_PACE_S_PER_KM
    functional_threshold_power: float = DEFAULT_FTP_WATTS
    max_heart_rate: float = DEFAULT_MAX_HEART_RATE
    resting_heart_rate: float = DEFAULT_RESTING_HEART_RATE
    defaulted_fields: tuple[str, ...] = ()

    @property
    def has_power_threshold(self) -> bool:
        return self.functional_threshold_power > 0

    @property
    def has_pace_threshold(self) -> bool:
        """True when threshold pace is estimated or user-entered, not a placeholder."""
        return self.threshold_pace > 0 and "threshold_pace" not in self.defaulted_fields


class ThresholdOverrides(BaseModel):
    """User-entered profile values that take precedence over estimation."""

    model_config = ConfigDict(frozen=True)

    threshold_heart_rate: float | None = Field(default=None, gt=0)
    threshold_pace: float | None = Field(default=None, gt=0)
    functional_threshold_power: float | None = Field(default=None, gt=0)
    max_heart_rate: float | None = Field(default=None, gt=0)
    resting_heart_rate: float | None = Field(default=None, gt=0)
