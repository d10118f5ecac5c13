# config/settings.py
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional
from enum import Enum
from dotenv import load_dotenv

from rightsizer.analytics.rightsizing import PolicyThresholds
from rightsizer.core.exceptions import ConfigurationException
from rightsizer.core.utils import MIB

# Load .env file explicitly
load_dotenv()

MIN_LOOKBACK_DAYS = 1
MAX_LOOKBACK_DAYS = 90

PRESET_LOOKBACK_DAYS = {
    "dev": 3,
    "production": 14,
    "critical": 30,
}


class LogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class PricingSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="PRICING_")

    provider: Optional[str] = Field(None, description="Pricing provider (aws, azure, gcp, default); detected when unset")
    region: str = Field("unknown", description="Pricing region")
    default_cpu_cost_per_core: float = Field(23.0, ge=0, description="Fallback USD per core per month")
    default_memory_cost_per_gib: float = Field(3.0, ge=0, description="Fallback USD per GiB per month")
    cache_ttl_hours: int = Field(24, ge=0, description="Price cache TTL in hours")
    retry_attempts: int = Field(3, ge=1, description="Number of retry attempts")
    retry_backoff_factor: float = Field(1.5, ge=0, description="Backoff factor for retries")

    @field_validator('provider', mode='before')
    @classmethod
    def validate_provider(cls, v):
        if isinstance(v, str):
            v = v.strip().lower()
            return v or None
        return v


class AnalysisSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="ANALYSIS_")

    lookback_days: int = Field(7, description="Days of history to analyze")
    resolution_minutes: int = Field(5, gt=0, description="Sample resolution in minutes")

    idle_cpu_utilization: float = Field(0.05, description="CPU utilization below which a workload is idle")
    reduction_threshold_pct: float = Field(25.0, description="Reduction percent that triggers right-sizing")
    min_monthly_savings: float = Field(1.0, description="Smallest monthly savings worth a change")
    high_impact_savings: float = Field(50.0)
    medium_impact_savings: float = Field(20.0)
    high_risk_reduction_pct: float = Field(75.0)
    medium_risk_reduction_pct: float = Field(50.0)
    material_growth_rate: float = Field(5.0, description="Monthly growth percent that adds headroom")
    growth_hedge: float = Field(0.5, description="Share of the 3 month projection added as headroom")
    min_buffer: float = Field(1.2)
    max_buffer: float = Field(3.0)
    steady_multiplier: float = Field(0.90)
    moderate_multiplier: float = Field(1.0)
    spiky_multiplier: float = Field(1.15)
    highly_variable_multiplier: float = Field(1.25)
    high_variation_cv: float = Field(0.5)
    high_variation_multiplier: float = Field(1.10)
    min_cpu_m: int = Field(10, ge=0, description="CPU floor in millicores")
    min_memory_bytes: int = Field(10 * MIB, ge=0, description="Memory floor in bytes")
    high_confidence_quality: float = Field(0.8)
    medium_confidence_quality: float = Field(0.6)

    @field_validator('lookback_days')
    @classmethod
    def validate_lookback_days(cls, v):
        if v < MIN_LOOKBACK_DAYS or v > MAX_LOOKBACK_DAYS:
            raise ValueError(
                f"lookback_days must be between {MIN_LOOKBACK_DAYS} and {MAX_LOOKBACK_DAYS}, got {v}"
            )
        return v

    def thresholds(self) -> PolicyThresholds:
        """Decision policy thresholds built from these settings."""
        return PolicyThresholds(**{name: getattr(self, name) for name in PolicyThresholds.model_fields})

    def apply_preset(self, preset: str) -> "AnalysisSettings":
        """Return a copy with the lookback window of a named preset."""
        key = preset.strip().lower()
        if key not in PRESET_LOOKBACK_DAYS:
            raise ConfigurationException(
                f"Unknown analysis preset: {preset}",
                {"available": sorted(PRESET_LOOKBACK_DAYS)}
            )
        return self.model_copy(update={"lookback_days": PRESET_LOOKBACK_DAYS[key]})


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    log_level: LogLevel = Field(LogLevel.INFO, description="Log level")
    log_format: str = Field("text", description="Log format (json or text)")
    logging_config_path: Optional[str] = Field(None, description="Optional YAML logging dictConfig")

    pricing: PricingSettings = Field(default_factory=lambda: PricingSettings())
    analysis: AnalysisSettings = Field(default_factory=lambda: AnalysisSettings())

    @field_validator('log_level', mode='before')
    @classmethod
    def validate_log_level(cls, v):
        if isinstance(v, str):
            return LogLevel(v.upper())
        return v

    @field_validator('log_format', mode='before')
    @classmethod
    def validate_log_format(cls, v):
        if isinstance(v, str):
            v = v.lower()
            if v not in ("json", "text"):
                raise ValueError(f"log_format must be 'json' or 'text', got {v!r}")
        return v

    @property
    def json_logs(self) -> bool:
        return self.log_format == "json"

    @classmethod
    def create_from_env(cls) -> "Settings":
        """Create settings instance from environment variables."""
        return cls()
