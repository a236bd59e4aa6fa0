from loguru import logger
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from load_engine.metrics.policy import EngineConfig, QualityCutoffs, RollingWindows, TrendDeadbands, ZoneBoundaries


class Settings(BaseSettings):
    log_level: str = Field(default="INFO", validation_alias="LOAD_ENGINE_LOG_LEVEL")
    default_window_days: int = Field(
        default=90,
        ge=0,
        validation_alias="LOAD_ENGINE_DEFAULT_WINDOW_DAYS",
        description="Lookback window in days when the caller does not pass one",
    )
    acute_days: int = Field(default=7, ge=1, validation_alias="LOAD_ENGINE_ACUTE_DAYS", description="ATL window length in days")
    chronic_days: int = Field(default=42, ge=1, validation_alias="LOAD_ENGINE_CHRONIC_DAYS", description="CTL window length in days")
    zone_boundaries: tuple[float, float, float, float] = Field(
        default=(0.60, 0.70, 0.80, 0.90),
        validation_alias="LOAD_ENGINE_ZONE_BOUNDARIES",
        description="Heart rate zone cut points as fractions of max HR (JSON list in env)",
    )
    pace_deadband: float = Field(default=2.0, ge=0.0, validation_alias="LOAD_ENGINE_PACE_DEADBAND")
    distance_deadband: float = Field(default=5.0, ge=0.0, validation_alias="LOAD_ENGINE_DISTANCE_DEADBAND")
    load_deadband: float = Field(default=10.0, ge=0.0, validation_alias="LOAD_ENGINE_LOAD_DEADBAND")
    intensity_deadband: float = Field(default=5.0, ge=0.0, validation_alias="LOAD_ENGINE_INTENSITY_DEADBAND")
    activity_count_deadband: float = Field(default=10.0, ge=0.0, validation_alias="LOAD_ENGINE_ACTIVITY_COUNT_DEADBAND")
    quality_cutoffs: QualityCutoffs = Field(
        default_factory=QualityCutoffs,
        validation_alias="LOAD_ENGINE_QUALITY_CUTOFFS",
        description="Data quality tiers as a JSON object; omitted tiers keep their defaults",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="LOAD_ENGINE_",
        populate_by_name=True,
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Validate that log level is one of the standard logging levels."""
        valid_levels = {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}
        upper_value = value.upper()
        if upper_value not in valid_levels:
            logger.warning(f"Invalid LOAD_ENGINE_LOG_LEVEL '{value}'. Valid levels are: {', '.join(sorted(valid_levels))}. Defaulting to INFO.")
            return "INFO"
        return upper_value

    @field_validator("zone_boundaries")
    @classmethod
    def validate_zone_boundaries(cls, value: tuple[float, float, float, float]) -> tuple[float, float, float, float]:
        """Fail at startup on unusable zone boundaries."""
        return ZoneBoundaries(boundaries=value).boundaries

    def engine_config(self) -> EngineConfig:
        """Build the engine policy bundle from these settings."""
        return EngineConfig(
            zones=ZoneBoundaries(boundaries=self.zone_boundaries),
            windows=RollingWindows(acute_days=self.acute_days, chronic_days=self.chronic_days),
            deadbands=TrendDeadbands(
                pace=self.pace_deadband,
                distance=self.distance_deadband,
                load=self.load_deadband,
                intensity=self.intensity_deadband,
                activity_count=self.activity_count_deadband,
            ),
            quality=self.quality_cutoffs,
        )


settings = Settings()
