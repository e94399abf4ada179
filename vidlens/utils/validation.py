from typing import Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..exceptions import ValidationException
from ..models import FrameStrategy

ModelT = TypeVar("ModelT", bound=BaseModel)

SCRIPT_TYPES = ("commercial", "documentary", "tutorial", "narrative", "custom")


class FrameRequest(BaseModel):
    """Request model for frame extraction."""

    model_config = ConfigDict(frozen=True)

    max_frames: int = Field(..., gt=0)
    strategy: FrameStrategy = Field(default=FrameStrategy.UNIFORM)
    output_dir: Optional[str] = Field(default=None)
    quality: int = Field(default=90, ge=1, le=100)

    @field_validator("output_dir")
    @classmethod
    def validate_output_dir(cls, v):
        if v is not None and len(v.strip()) == 0:
            return None
        return v


class ScriptOptions(BaseModel):
    """Request model for shooting-script generation."""

    model_config = ConfigDict(frozen=True)

    prompt: Optional[str] = Field(default=None)
    script_type: str = Field(default="commercial")
    target_duration: Optional[float] = Field(default=None, gt=0)
    target_audience: str = Field(default="general audience")
    style: str = Field(default="professional and engaging")

    @field_validator("script_type")
    @classmethod
    def validate_script_type(cls, v):
        v = (v or "").strip().lower()
        if v not in SCRIPT_TYPES:
            raise ValueError(f"script_type must be one of: {', '.join(SCRIPT_TYPES)}")
        return v


def parse_request(model_cls: Type[ModelT], **kwargs) -> ModelT:
    """Build a request model, converting pydantic errors into ValidationException."""
    try:
        return model_cls(**kwargs)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" for error in e.errors()
        )
        raise ValidationException(
            f"Invalid {model_cls.__name__} parameters: {problems}",
            error_code="INVALID_PARAMETERS",
            details={"errors": [error["msg"] for error in e.errors()]},
        ) from e


def require_path(value: Optional[str], name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationException(f"Parameter '{name}' is required", error_code="MISSING_PARAMETER")
    return str(value).strip()
