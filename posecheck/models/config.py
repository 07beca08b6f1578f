from __future__ import annotations

from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

from posecheck.core.constants import ANGLE_DEVIATION_THRESHOLD_DEG, ANGLE_ROUND_DIGITS


class ServerConfig(BaseModel):
    host: str = "0.0.0.0"
    port: int = 8000
    token: str = "change-me"


class ComparisonConfig(BaseModel):
    threshold_deg: float = ANGLE_DEVIATION_THRESHOLD_DEG
    round_digits: int = ANGLE_ROUND_DIGITS

    @field_validator("threshold_deg")
    @classmethod
    def _validate_threshold(cls, value: float) -> float:
        if value < 0.0 or value > 180.0:
            raise ValueError("threshold_deg must be within [0, 180]")
        return value

    @field_validator("round_digits")
    @classmethod
    def _validate_digits(cls, value: int) -> int:
        if value < 0:
            raise ValueError("round_digits must be >= 0")
        return value


class BoneStyleConfig(BaseModel):
    color: str
    width: float = 6.0


class StyleConfig(BaseModel):
    tracked_bone: BoneStyleConfig = Field(
        default_factory=lambda: BoneStyleConfig(color="#008000", width=6.0)
    )
    inferred_bone: BoneStyleConfig = Field(
        default_factory=lambda: BoneStyleConfig(color="#808080", width=1.0)
    )
    incorrect_bone: BoneStyleConfig = Field(
        default_factory=lambda: BoneStyleConfig(color="#FF0000", width=6.0)
    )
    tracked_joint_color: str = "#44C044"
    inferred_joint_color: str = "#FFFF00"
    center_point_color: str = "#0000FF"
    clipped_edge_color: str = "#FF0000"
    joint_thickness: float = 3.0
    body_center_thickness: float = 10.0
    clip_bounds_thickness: float = 10.0


class ReferenceConfig(BaseModel):
    path: str = "data/reference/pose.json"
    load_on_start: bool = True


class LoggingConfig(BaseModel):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    json_logs: bool = False
    file: Optional[str] = None

    @field_validator("level", mode="before")
    @classmethod
    def _upper_level(cls, value):
        return value.upper() if isinstance(value, str) else value


class AppConfig(BaseModel):
    server: ServerConfig = Field(default_factory=ServerConfig)
    comparison: ComparisonConfig = Field(default_factory=ComparisonConfig)
    styles: StyleConfig = Field(default_factory=StyleConfig)
    reference: ReferenceConfig = Field(default_factory=ReferenceConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    def reference_path(self) -> Path:
        return Path(self.reference.path)

    def maybe_masked_dump(self, mask_token: bool = True) -> dict:
        data = self.model_dump()
        if mask_token:
            token = data["server"].get("token", "")
            if token:
                data["server"]["token"] = "*" * max(4, len(token))
        return data


class ConfigUpdate(BaseModel):
    server: Optional[ServerConfig] = None
    comparison: Optional[ComparisonConfig] = None
    styles: Optional[StyleConfig] = None
    reference: Optional[ReferenceConfig] = None
    logging: Optional[LoggingConfig] = None
