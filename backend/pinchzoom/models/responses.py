"""
API request and response models.
"""

from datetime import datetime
from typing import Optional, Any, List
from pydantic import BaseModel, Field

from pinchzoom.services.layout import ScaleType
from pinchzoom.models.session import (
    BoundsModel,
    ImageSize,
    IntentModel,
    TransformModel,
    ViewportSize,
    ZoomOptionsModel,
)


class CreateSessionRequest(BaseModel):
    """Request body for POST /api/v1/sessions."""
    viewport: ViewportSize
    image: Optional[ImageSize] = Field(
        default=None,
        description="Intrinsic image size. Without it gestures are no-ops.",
    )
    scale_type: ScaleType = ScaleType.FIT_CENTER
    options: Optional[ZoomOptionsModel] = Field(
        default=None,
        description="Zoom options. Server defaults are used when omitted.",
    )


class ResetRequest(BaseModel):
    """Request body for POST /api/v1/sessions/{session_id}/reset."""
    animate: Optional[bool] = Field(
        default=None,
        description="Animate the reset; defaults to the animate_on_reset option",
    )


class ScaleTypeRequest(BaseModel):
    """Request body for PUT /api/v1/sessions/{session_id}/scale-type."""
    scale_type: ScaleType


class EnabledRequest(BaseModel):
    """Request body for PUT /api/v1/sessions/{session_id}/enabled."""
    enabled: bool


class StateSummary(BaseModel):
    """Engine state after a call."""
    transform: TransformModel
    bounds: BoundsModel
    current_scale_factor: float
    is_animating: bool
    is_captured: bool
    start_scale: Optional[float] = None
    disallow_parent_intercept: bool


class SessionResponse(BaseModel):
    """Response from GET /api/v1/sessions/{session_id}."""
    session_id: str
    created_at: datetime
    expires_at: datetime
    enabled: bool
    scale_type: ScaleType
    viewport_width: float
    viewport_height: float
    image_width: Optional[float] = None
    image_height: Optional[float] = None
    options: ZoomOptionsModel
    state: StateSummary


class EventResponse(BaseModel):
    """Response from POST /api/v1/sessions/{session_id}/events."""
    session_id: str
    intents: List[IntentModel]
    state: StateSummary


class TickResponse(BaseModel):
    """Response from POST /api/v1/sessions/{session_id}/tick."""
    session_id: str
    updated: bool = Field(description="False when no animation was running")
    state: StateSummary


class ErrorDetail(BaseModel):
    """Error detail structure."""
    code: str
    message: str
    details: Optional[dict[str, Any]] = None


class ErrorResponse(BaseModel):
    """Standard error response."""
    error: ErrorDetail
