"""
Zoom session endpoints.
"""

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Response, status

from pinchzoom.models.responses import (
    CreateSessionRequest,
    EnabledRequest,
    ErrorResponse,
    EventResponse,
    ResetRequest,
    ScaleTypeRequest,
    SessionResponse,
    StateSummary,
    TickResponse,
)
from pinchzoom.models.session import (
    BoundsModel,
    ImageSize,
    IntentModel,
    PointerEventModel,
    TapSignalModel,
    TransformModel,
    ViewportSize,
    ZoomOptionsModel,
    ZoomOptionsPatch,
)
from pinchzoom.services.options import InvalidConfiguration
from pinchzoom.services.sessions import ZoomSession, session_registry

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sessions", tags=["sessions"])


def get_session_or_404(session_id: str) -> ZoomSession:
    """Look up session or raise 404."""
    session = session_registry.get_session(session_id)
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={
                "code": "SESSION_NOT_FOUND",
                "message": f"Session '{session_id}' does not exist or has expired",
            },
        )
    return session


def invalid_configuration(e: InvalidConfiguration) -> HTTPException:
    return HTTPException(
        status_code=422,
        detail={
            "code": e.code,
            "message": e.message,
            "details": e.details,
        },
    )


def build_state(session: ZoomSession) -> StateSummary:
    controller = session.controller
    engine = controller.engine
    return StateSummary(
        transform=TransformModel.from_transform(engine.transform),
        bounds=BoundsModel.from_bounds(engine.bounds),
        current_scale_factor=engine.current_scale_factor,
        is_animating=engine.is_animating,
        is_captured=engine.is_captured,
        start_scale=engine.session.start_scale if engine.session else None,
        disallow_parent_intercept=controller.should_disallow_parent_intercept(),
    )


def build_session_response(session: ZoomSession) -> SessionResponse:
    controller = session.controller
    engine = controller.engine
    return SessionResponse(
        session_id=session.session_id,
        created_at=session.created_at,
        expires_at=session.expires_at,
        enabled=controller.enabled,
        scale_type=engine.scale_type,
        viewport_width=engine.viewport_width,
        viewport_height=engine.viewport_height,
        image_width=engine.image_width,
        image_height=engine.image_height,
        options=ZoomOptionsModel.from_options(controller.options),
        state=build_state(session),
    )


@router.post(
    "",
    response_model=SessionResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        422: {"model": ErrorResponse, "description": "Invalid configuration"},
    },
)
def create_session(request: CreateSessionRequest) -> SessionResponse:
    """
    Create a zoom session for an image shown in a viewport.
    """
    options = request.options.to_options() if request.options else None
    try:
        session = session_registry.create_session(
            viewport_width=request.viewport.width,
            viewport_height=request.viewport.height,
            image_width=request.image.width if request.image else None,
            image_height=request.image.height if request.image else None,
            scale_type=request.scale_type,
            options=options,
        )
    except InvalidConfiguration as e:
        raise invalid_configuration(e)
    return build_session_response(session)


@router.get(
    "/{session_id}",
    response_model=SessionResponse,
    responses={
        404: {"model": ErrorResponse, "description": "Session not found"},
    },
)
def get_session(session_id: str) -> SessionResponse:
    """
    Get the current transform, options and layout of a session.
    """
    session = get_session_or_404(session_id)
    with session.lock:
        return build_session_response(session)


@router.delete(
    "/{session_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={
        404: {"model": ErrorResponse, "description": "Session not found"},
    },
)
def delete_session(session_id: str) -> Response:
    if not session_registry.delete_session(session_id):
        get_session_or_404(session_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{session_id}/events",
    response_model=EventResponse,
    responses={
        404: {"model": ErrorResponse, "description": "Session not found"},
    },
)
def post_event(session_id: str, event: PointerEventModel) -> EventResponse:
    """
    Feed one pointer event through the gesture classifier and engine.

    Returns the intents that were applied and the resulting state.
    """
    session = get_session_or_404(session_id)
    with session.lock:
        intents = session.controller.handle_event(event.to_event())
        logger.debug(f"Session {session_id}: {event.phase.value} -> {len(intents)} intent(s)")
        return EventResponse(
            session_id=session_id,
            intents=[IntentModel(**intent.to_dict()) for intent in intents],
            state=build_state(session),
        )


@router.post(
    "/{session_id}/taps",
    response_model=StateSummary,
    responses={
        404: {"model": ErrorResponse, "description": "Session not found"},
    },
)
def post_tap(session_id: str, tap: TapSignalModel) -> StateSummary:
    """
    Record a tap-detector signal. It takes effect on the next pointer event.
    """
    session = get_session_or_404(session_id)
    with session.lock:
        session.controller.handle_tap(tap.signal)
        return build_state(session)


@router.post(
    "/{session_id}/tick",
    response_model=TickResponse,
    responses={
        404: {"model": ErrorResponse, "description": "Session not found"},
    },
)
def tick(session_id: str) -> TickResponse:
    """
    Advance running animations to the server's current time.
    """
    session = get_session_or_404(session_id)
    with session.lock:
        result = session.controller.tick()
        return TickResponse(
            session_id=session_id,
            updated=result is not None,
            state=build_state(session),
        )


@router.post(
    "/{session_id}/reset",
    response_model=StateSummary,
    responses={
        404: {"model": ErrorResponse, "description": "Session not found"},
    },
)
def reset(session_id: str, request: Optional[ResetRequest] = None) -> StateSummary:
    """
    Reset the image to its starting transform.
    """
    session = get_session_or_404(session_id)
    animate = request.animate if request else None
    with session.lock:
        session.controller.reset(animate=animate)
        return build_state(session)


@router.patch(
    "/{session_id}/options",
    response_model=SessionResponse,
    responses={
        404: {"model": ErrorResponse, "description": "Session not found"},
        422: {"model": ErrorResponse, "description": "Invalid configuration"},
    },
)
def update_options(session_id: str, patch: ZoomOptionsPatch) -> SessionResponse:
    """
    Change some options. A rejected change leaves every option as it was.
    """
    session = get_session_or_404(session_id)
    with session.lock:
        try:
            session.controller.update_options(**patch.changes())
        except InvalidConfiguration as e:
            logger.warning(f"Session {session_id}: rejected options ({e.message})")
            raise invalid_configuration(e)
        return build_session_response(session)


@router.put(
    "/{session_id}/image",
    response_model=SessionResponse,
    responses={
        404: {"model": ErrorResponse, "description": "Session not found"},
    },
)
def set_image(session_id: str, image: ImageSize) -> SessionResponse:
    """
    Swap the displayed image. The session start state is captured again.
    """
    session = get_session_or_404(session_id)
    with session.lock:
        session.controller.set_image(image.width, image.height)
        return build_session_response(session)


@router.delete(
    "/{session_id}/image",
    response_model=SessionResponse,
    responses={
        404: {"model": ErrorResponse, "description": "Session not found"},
    },
)
def clear_image(session_id: str) -> SessionResponse:
    session = get_session_or_404(session_id)
    with session.lock:
        session.controller.clear_image()
        return build_session_response(session)


@router.put(
    "/{session_id}/viewport",
    response_model=SessionResponse,
    responses={
        404: {"model": ErrorResponse, "description": "Session not found"},
    },
)
def set_viewport(session_id: str, viewport: ViewportSize) -> SessionResponse:
    session = get_session_or_404(session_id)
    with session.lock:
        session.controller.set_viewport(viewport.width, viewport.height)
        return build_session_response(session)


@router.put(
    "/{session_id}/scale-type",
    response_model=SessionResponse,
    responses={
        404: {"model": ErrorResponse, "description": "Session not found"},
    },
)
def set_scale_type(session_id: str, request: ScaleTypeRequest) -> SessionResponse:
    session = get_session_or_404(session_id)
    with session.lock:
        session.controller.set_scale_type(request.scale_type)
        return build_session_response(session)


@router.put(
    "/{session_id}/enabled",
    response_model=SessionResponse,
    responses={
        404: {"model": ErrorResponse, "description": "Session not found"},
    },
)
def set_enabled(session_id: str, request: EnabledRequest) -> SessionResponse:
    """
    Enable or disable gestures. Disabling snaps the image back to its layout.
    """
    session = get_session_or_404(session_id)
    with session.lock:
        session.controller.set_enabled(request.enabled)
        return build_session_response(session)
