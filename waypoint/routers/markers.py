from fastapi import APIRouter, Depends, HTTPException

from waypoint.dependencies import AppContainer, get_container
from waypoint.models.schemas import MapStateResponse

router = APIRouter()


def _map_state(container: AppContainer) -> MapStateResponse:
    store = container.marker_store
    return MapStateResponse(markers=list(store.snapshot()), route=store.current_route)


@router.get("/markers", response_model=MapStateResponse)
async def get_markers(container: AppContainer = Depends(get_container)):
    """Current markers and the active route."""
    return _map_state(container)


@router.post("/markers/{marker_id}/select", response_model=MapStateResponse)
async def select_marker(marker_id: str, container: AppContainer = Depends(get_container)):
    if container.marker_store.get(marker_id) is None:
        raise HTTPException(status_code=404, detail=f"Marker not found: {marker_id}")
    container.trip_controller.select_marker(marker_id)
    return _map_state(container)


@router.delete("/markers/selection", response_model=MapStateResponse)
async def clear_selection(container: AppContainer = Depends(get_container)):
    container.trip_controller.clear_selection()
    return _map_state(container)


@router.delete("/markers", response_model=MapStateResponse)
async def clear_markers(container: AppContainer = Depends(get_container)):
    container.trip_controller.clear_markers()
    return _map_state(container)
