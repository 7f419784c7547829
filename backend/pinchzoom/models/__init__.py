"""
Pydantic models for request/response schemas.
"""

from pinchzoom.models.session import (
    ZoomOptionsModel,
    ZoomOptionsPatch,
    TransformModel,
    BoundsModel,
    PointerEventModel,
    TapSignalModel,
    ImageSize,
    ViewportSize,
    IntentModel,
)
from pinchzoom.models.responses import (
    CreateSessionRequest,
    ResetRequest,
    ScaleTypeRequest,
    EnabledRequest,
    StateSummary,
    SessionResponse,
    EventResponse,
    TickResponse,
    ErrorDetail,
    ErrorResponse,
)

__all__ = [
    "ZoomOptionsModel",
    "ZoomOptionsPatch",
    "TransformModel",
    "BoundsModel",
    "PointerEventModel",
    "TapSignalModel",
    "ImageSize",
    "ViewportSize",
    "IntentModel",
    "CreateSessionRequest",
    "ResetRequest",
    "ScaleTypeRequest",
    "EnabledRequest",
    "StateSummary",
    "SessionResponse",
    "EventResponse",
    "TickResponse",
    "ErrorDetail",
    "ErrorResponse",
]
