"""
Session and input data models.
"""

from typing import Optional
from pydantic import BaseModel, Field

from pinchzoom.config import settings
from pinchzoom.services.gestures import PointerEvent, PointerPhase, TapSignal
from pinchzoom.services.layout import ScaleType
from pinchzoom.services.options import AutoResetMode, ZoomOptions
from pinchzoom.services.transform import AffineTransform, DisplayedBounds


class ZoomOptionsModel(BaseModel):
    """
    Full set of zoom options.

    Fields left out of a request take the server defaults from `settings`.
    """
    zoomable: bool = Field(default_factory=lambda: settings.default_zoomable)
    translatable: bool = Field(default_factory=lambda: settings.default_translatable)
    restrict_bounds: bool = Field(default_factory=lambda: settings.default_restrict_bounds)
    animate_on_reset: bool = Field(default_factory=lambda: settings.default_animate_on_reset)
    auto_center: bool = Field(default_factory=lambda: settings.default_auto_center)
    double_tap_to_zoom: bool = Field(default_factory=lambda: settings.default_double_tap_to_zoom)
    auto_reset_mode: AutoResetMode = Field(
        default_factory=lambda: AutoResetMode(settings.default_auto_reset_mode.upper())
    )
    min_scale: float = Field(
        default_factory=lambda: settings.default_min_scale, allow_inf_nan=False
    )
    max_scale: float = Field(
        default_factory=lambda: settings.default_max_scale, allow_inf_nan=False
    )
    double_tap_scale_factor: float = Field(
        default_factory=lambda: settings.default_double_tap_scale_factor, allow_inf_nan=False
    )
    reset_duration_ms: int = Field(default_factory=lambda: settings.reset_duration_ms, ge=0)

    @classmethod
    def from_options(cls, options: ZoomOptions) -> "ZoomOptionsModel":
        return cls(**options.to_dict())

    def to_options(self) -> ZoomOptions:
        return ZoomOptions(**self.model_dump())


class ZoomOptionsPatch(BaseModel):
    """Partial option update; only the fields sent are applied."""
    zoomable: Optional[bool] = None
    translatable: Optional[bool] = None
    restrict_bounds: Optional[bool] = None
    animate_on_reset: Optional[bool] = None
    auto_center: Optional[bool] = None
    double_tap_to_zoom: Optional[bool] = None
    auto_reset_mode: Optional[AutoResetMode] = None
    min_scale: Optional[float] = Field(default=None, allow_inf_nan=False)
    max_scale: Optional[float] = Field(default=None, allow_inf_nan=False)
    double_tap_scale_factor: Optional[float] = Field(default=None, allow_inf_nan=False)
    reset_duration_ms: Optional[int] = Field(default=None, ge=0)

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True, exclude_none=True)


class TransformModel(BaseModel):
    """Scale + translation of the displayed image."""
    scale_x: float
    scale_y: float
    tx: float
    ty: float

    @classmethod
    def from_transform(cls, transform: AffineTransform) -> "TransformModel":
        return cls(
            scale_x=transform.scale_x,
            scale_y=transform.scale_y,
            tx=transform.tx,
            ty=transform.ty,
        )


class BoundsModel(BaseModel):
    """Displayed image rectangle in viewport coordinates."""
    left: float
    top: float
    right: float
    bottom: float

    @classmethod
    def from_bounds(cls, bounds: DisplayedBounds) -> "BoundsModel":
        return cls(**bounds.to_dict())


class PointerEventModel(BaseModel):
    """A normalized pointer event."""
    phase: PointerPhase
    pointer_count: int = Field(default=1, ge=0)
    focal_x: float = 0.0
    focal_y: float = 0.0
    pinch_scale_factor: Optional[float] = Field(
        default=None,
        gt=0,
        description="Span ratio relative to the previous event while pinching",
    )
    pinch_in_progress: bool = False

    def to_event(self) -> PointerEvent:
        return PointerEvent(**self.model_dump())


class TapSignalModel(BaseModel):
    """A signal from the client's tap detector."""
    signal: TapSignal


class ImageSize(BaseModel):
    """Intrinsic size of the displayed image."""
    width: float = Field(gt=0)
    height: float = Field(gt=0)


class ViewportSize(BaseModel):
    """Size of the viewport the image is shown in."""
    width: float = Field(gt=0)
    height: float = Field(gt=0)


class IntentModel(BaseModel):
    """A classified intent applied while processing an event."""
    kind: str
    dx: float = 0.0
    dy: float = 0.0
    focal_x: float = 0.0
    focal_y: float = 0.0
    factor: float = 1.0
    pointer_count: int = 0
    pinch_in_progress: bool = False
