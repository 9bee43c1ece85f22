"""Pydantic schemas for configuration validation."""

from pydantic import BaseModel, Field, field_validator


# =============================================================================
# Logging Configuration
# =============================================================================


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file: str | None = None

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {v}")
        return level

    @field_validator("file", mode="before")
    @classmethod
    def empty_file_is_none(cls, v):
        return v or None


# =============================================================================
# Upstream Providers
# =============================================================================


class ProviderConfig(BaseModel):
    """Single upstream provider."""

    base_url: str
    api_key: str = ""
    timeout: float = 10.0  # seconds
    enabled: bool = True
    model: str | None = None  # narrative providers only

    @property
    def has_api_key(self) -> bool:
        return bool(self.api_key.strip())


class ProvidersConfig(BaseModel):
    """All upstream providers."""

    dexscreener: ProviderConfig = Field(
        default_factory=lambda: ProviderConfig(base_url="https://api.dexscreener.com")
    )
    coingecko: ProviderConfig = Field(
        default_factory=lambda: ProviderConfig(base_url="https://api.coingecko.com/api/v3")
    )
    coinmarketcap: ProviderConfig = Field(
        default_factory=lambda: ProviderConfig(base_url="https://pro-api.coinmarketcap.com")
    )
    gemini: ProviderConfig = Field(
        default_factory=lambda: ProviderConfig(
            base_url="https://generativelanguage.googleapis.com/v1beta",
            model="gemini-2.0-flash",
            timeout=15.0,
        )
    )


# =============================================================================
# Scoring
# =============================================================================


class ScoringConfig(BaseModel):
    """Composite confidence weights and thresholds."""

    rsi_weight: float = 0.25
    bollinger_weight: float = 0.20
    dex_weight: float = 0.30
    momentum_weight: float = 0.25

    rsi_extreme_score: float = 85.0
    rsi_normal_score: float = 60.0
    bollinger_extreme_score: float = 80.0
    bollinger_normal_score: float = 55.0
    bollinger_extreme_low: float = 0.2
    bollinger_extreme_high: float = 0.8

    dex_ratio_slope: float = 30.0
    momentum_slope: float = 2.0
    component_floor: float = 40.0
    component_ceiling: float = 100.0

    top50_bonus: float = 10.0
    top100_bonus: float = 5.0
    max_confidence: int = 99

    @field_validator("rsi_weight", "bollinger_weight", "dex_weight", "momentum_weight")
    @classmethod
    def validate_weight(cls, v: float) -> float:
        if v < 0:
            raise ValueError("Weights must be non-negative")
        return v


class ProjectionConfig(BaseModel):
    """Six-month market-cap projection factors."""

    base_growth: float = 0.15
    momentum_divisor: float = 100.0
    rsi_oversold_factor: float = 1.3
    rsi_overbought_factor: float = 0.7
    sentiment_divisor: float = 200.0
    change_30d_divisor: float = 200.0

    bullish_multiplier: float = 1.5
    bullish_floor: float = 0.1
    bearish_multiplier: float = 0.5
    bearish_floor: float = -0.2
    low_multiplier: float = 0.5
    high_multiplier: float = 2.5

    max_confidence: float = 85.0


# =============================================================================
# Pipeline / API
# =============================================================================


class PipelineConfig(BaseModel):
    """Aggregation pipeline behaviour."""

    history_days: int = 30
    synthetic_points: int = 30
    synthetic_jitter: float = 0.05
    upstream_timeout: float = 12.0  # seconds, per fan-out call
    narrative: str = "gemini"  # registered narrative generator name

    @field_validator("synthetic_jitter")
    @classmethod
    def validate_jitter(cls, v: float) -> float:
        if not 0 <= v < 1:
            raise ValueError("synthetic_jitter must be in [0, 1)")
        return v


class ApiConfig(BaseModel):
    """HTTP server binding."""

    host: str = "127.0.0.1"
    port: int = 8000


# =============================================================================
# Settings (Root Config)
# =============================================================================


class SettingsConfig(BaseModel):
    """Root settings configuration."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    providers: ProvidersConfig = Field(default_factory=ProvidersConfig)
    scoring: ScoringConfig = Field(default_factory=ScoringConfig)
    projection: ProjectionConfig = Field(default_factory=ProjectionConfig)
    pipeline: PipelineConfig = Field(default_factory=PipelineConfig)
    api: ApiConfig = Field(default_factory=ApiConfig)
