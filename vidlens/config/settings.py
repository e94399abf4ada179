from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, PrivateAttr, SecretStr
from typing import Optional
from dotenv import load_dotenv, find_dotenv


class HunyuanConfig(BaseSettings):
    """Tencent Cloud Hunyuan API configuration."""

    secret_id: Optional[str] = Field(default=None)
    secret_key: Optional[SecretStr] = Field(default=None)
    region: str = Field(default="ap-beijing")
    endpoint: str = Field(default="hunyuan.tencentcloudapi.com")
    vision_model: str = Field(default="hunyuan-vision")
    text_model: str = Field(default="hunyuan-lite")
    timeout: int = Field(default=120, ge=1)
    request_interval_seconds: float = Field(default=1.0, ge=0)
    max_images_per_request: int = Field(default=4, ge=1)
    max_image_size_mb: float = Field(default=5.0, gt=0)

    model_config = SettingsConfigDict(
        env_prefix="HUNYUAN_",
        env_file=".env",
        env_file_encoding="utf-8",
        validate_assignment=True,
        extra="ignore",
        case_sensitive=False
    )

    def __init__(self, **kwargs):
        # Force load environment variables before validation
        load_dotenv(find_dotenv(usecwd=True))
        super().__init__(**kwargs)

    @property
    def has_credentials(self) -> bool:
        return bool(self.secret_id and self.secret_key and self.secret_key.get_secret_value())


class FrameExtractionConfig(BaseSettings):
    """Frame extraction configuration."""

    output_dir: str = Field(default="./temp_frames")
    capture_timeout_seconds: float = Field(default=30.0, gt=0)
    default_quality: int = Field(default=90, ge=1, le=100)
    analysis_quality: int = Field(default=85, ge=1, le=100)
    failure_threshold: int = Field(default=3, ge=1)
    large_request_warning: int = Field(default=100, ge=1)
    fallback_duration_seconds: float = Field(default=60.0, gt=0)

    model_config = SettingsConfigDict(
        env_prefix="FRAMES_",
        env_file=".env",
        env_file_encoding="utf-8",
        validate_assignment=True,
        extra="ignore",
        case_sensitive=False
    )

    def __init__(self, **kwargs):
        load_dotenv(find_dotenv(usecwd=True))
        super().__init__(**kwargs)


class LoggingConfig(BaseSettings):
    """Logging configuration."""

    level: str = Field(default="INFO")
    log_file: Optional[str] = Field(default=None)
    enable_file_logging: bool = Field(default=False)
    max_file_size: str = Field(default="10 MB")
    retention_days: int = Field(default=7)

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        validate_assignment=True,
        extra="ignore",
        case_sensitive=False
    )


class VidlensConfig(BaseSettings):
    """Main configuration class."""

    # Application settings
    app_name: str = Field(default="vidlens")
    app_version: str = Field(default="1.0.0")
    debug: bool = Field(default=False)

    # Sections are built on first access
    _hunyuan: Optional[HunyuanConfig] = PrivateAttr(default=None)
    _frames: Optional[FrameExtractionConfig] = PrivateAttr(default=None)
    _logging: Optional[LoggingConfig] = PrivateAttr(default=None)

    model_config = SettingsConfigDict(
        env_prefix="VIDLENS_",
        env_file=".env",
        env_file_encoding="utf-8",
        validate_assignment=True,
        extra="ignore",
        case_sensitive=False
    )

    def __init__(self, **kwargs):
        # Force load environment variables before initializing
        load_dotenv(find_dotenv(usecwd=True))

        super().__init__(**kwargs)

    @property
    def hunyuan(self) -> HunyuanConfig:
        if self._hunyuan is None:
            self._hunyuan = HunyuanConfig()
        return self._hunyuan

    @property
    def frames(self) -> FrameExtractionConfig:
        if self._frames is None:
            self._frames = FrameExtractionConfig()
        return self._frames

    @property
    def logging(self) -> LoggingConfig:
        if self._logging is None:
            self._logging = LoggingConfig()
        return self._logging
