"""
Shared API models.

This module contains models used by several routers:
- Point and Color parameter types
- Buffer descriptions and operation results
"""

from typing import Any, Dict, Tuple, Union

from pydantic import BaseModel, Field, field_validator

from core.constants import Colors, StoreConstants
from core.geometry import Point as GeometryPoint


def parse_color(value: Union[int, str]) -> int:
    """
    Parse a color into packed ARGB.

    Accepts an int, "#RRGGBB" (opaque) or "#AARRGGBB".

    Raises:
        ValueError: If the value cannot be parsed
    """
    if isinstance(value, bool):
        raise ValueError("Color must be an integer or hex string")
    if isinstance(value, int):
        if not 0 <= value <= 0xFFFFFFFF:
            raise ValueError(f"Color {value} outside 32-bit range")
        return value

    text = str(value).strip().lstrip("#")
    if len(text) not in (6, 8):
        raise ValueError(f"Color '{value}' must be #RRGGBB or #AARRGGBB")
    try:
        parsed = int(text, 16)
    except ValueError as e:
        raise ValueError(f"Color '{value}' is not valid hex") from e
    return parsed | 0xFF000000 if len(text) == 6 else parsed


def format_color(argb: int) -> str:
    return f"#{argb & 0xFFFFFFFF:08X}"


class Point(BaseModel):
    """2D point (may lie outside the target buffer)"""

    x: float = Field(..., ge=-StoreConstants.MAX_COORDINATE, le=StoreConstants.MAX_COORDINATE)
    y: float = Field(..., ge=-StoreConstants.MAX_COORDINATE, le=StoreConstants.MAX_COORDINATE)

    def to_geometry(self) -> GeometryPoint:
        return GeometryPoint(self.x, self.y)

    def to_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)


class ColorParam(BaseModel):
    """Mixin for requests carrying a drawing color"""

    color: Union[int, str] = Field(
        default=Colors.WHITE, description="Packed ARGB int, #RRGGBB or #AARRGGBB"
    )

    @field_validator("color")
    @classmethod
    def validate_color(cls, value):
        return parse_color(value)


class BufferInfo(BaseModel):
    """Description of a stored buffer (no pixel data)"""

    id: str
    name: str
    width: int
    height: int
    created_at: str
    updated_at: str
    metadata: Dict[str, Any] = Field(default_factory=dict)


class OperationResponse(BaseModel):
    """Result of an operation applied to a stored buffer"""

    success: bool = True
    buffer_id: str = Field(..., description="Buffer holding the result")
    operation: str
    processing_time_ms: int
    details: Dict[str, Any] = Field(default_factory=dict)
