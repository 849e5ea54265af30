# routes/restaurant_routes.py
import asyncio
from typing import Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query, WebSocket, WebSocketDisconnect, status
from fastapi.encoders import jsonable_encoder

from cookwho.core.dependencies import get_store, require_cook
from cookwho.db.document_store import DocumentStore
from cookwho.models.restaurant import AvailabilityUpdate, CookPage, RestaurantListResponse, RestaurantOut, RestaurantUpsert
from cookwho.models.user import UserOut
from cookwho.services.restaurant_service import (
    LOCATION_ERROR, RestaurantDirectory, get_cook_page, list_restaurants, set_availability, upsert_my_restaurant,
)
from cookwho.utils.geocode import geocode_postcode, GeocodeError
from cookwho.utils.logger import get_logger

logger = get_logger("Restaurant_Route")
router = APIRouter(tags=["Restaurants"])


async def resolve_location(lat: Optional[float], lon: Optional[float], postcode: Optional[str]):
    """
    Returns (location, error). Coordinates win over a postcode; half a coordinate
    pair or a postcode that cannot be geocoded is a location error.
    """
    if lat is not None and lon is not None:
        return {"latitude": lat, "longitude": lon}, None
    if lat is not None or lon is not None:
        return None, LOCATION_ERROR
    if postcode:
        try:
            return await geocode_postcode(postcode), None
        except GeocodeError as e:
            logger.warning(f"Location lookup failed: {e}")
            return None, LOCATION_ERROR
    return None, None


@router.get("/restaurants", response_model=RestaurantListResponse)
async def api_list_restaurants(
    lat: Optional[float] = Query(None, ge=-90, le=90),
    lon: Optional[float] = Query(None, ge=-180, le=180),
    postcode: Optional[str] = None,
    max_distance: Optional[float] = Query(None, gt=0, description="Kilometres"),
    category: Optional[str] = None,
    store: DocumentStore = Depends(get_store),
):
    """
    Available restaurants, nearest first when a location is known, optionally
    restricted to those serving a master menu category.
    """
    location, location_error = await resolve_location(lat, lon, postcode)
    if location_error:
        return {"restaurants": [], "location_error": location_error}
    restaurants = await list_restaurants(store, location, max_distance, category)
    return {"restaurants": restaurants, "location_error": None}


@router.websocket("/restaurants/live")
async def ws_restaurants(
    websocket: WebSocket,
    lat: Optional[float] = Query(None, ge=-90, le=90),
    lon: Optional[float] = Query(None, ge=-180, le=180),
    max_distance: Optional[float] = Query(None, gt=0, description="Kilometres"),
    category: Optional[str] = None,
    store: DocumentStore = Depends(get_store),
):
    """Pushes the filtered restaurant list every time the underlying data changes."""
    await websocket.accept()
    location, location_error = await resolve_location(lat, lon, None)
    if location_error:
        await websocket.send_json({"restaurants": [], "location_error": location_error})
        await websocket.close()
        return

    updates: asyncio.Queue = asyncio.Queue()
    directory = RestaurantDirectory(store, updates.put_nowait, location, max_distance, category).start()
    receiver = asyncio.create_task(websocket.receive_text())
    try:
        while True:
            getter = asyncio.create_task(updates.get())
            done, _ = await asyncio.wait({getter, receiver}, return_when=asyncio.FIRST_COMPLETED)
            if receiver in done:
                getter.cancel()
                # raises WebSocketDisconnect once the client goes away
                receiver.result()
                receiver = asyncio.create_task(websocket.receive_text())
                continue
            restaurants = getter.result()
            await websocket.send_json(jsonable_encoder({"restaurants": restaurants, "location_error": None}))
    except WebSocketDisconnect:
        logger.info("Restaurant feed client disconnected")
    finally:
        receiver.cancel()
        directory.close()


@router.get("/cooks/{user_id}", response_model=CookPage)
async def api_get_cook_page(
    user_id: str,
    category: Optional[str] = None,
    lat: Optional[float] = Query(None, ge=-90, le=90),
    lon: Optional[float] = Query(None, ge=-180, le=180),
    store: DocumentStore = Depends(get_store),
):
    location = {"latitude": lat, "longitude": lon} if lat is not None and lon is not None else None
    page = await get_cook_page(store, user_id, location, category)
    if page is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Cook not found")
    return page


@router.put("/restaurants/me", response_model=RestaurantOut)
async def api_upsert_my_restaurant(
    payload: RestaurantUpsert = Body(...),
    current_user: UserOut = Depends(require_cook),
    store: DocumentStore = Depends(get_store),
):
    try:
        return await upsert_my_restaurant(store, current_user, payload)
    except GeocodeError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception:
        logger.exception("Error saving restaurant")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Could not save your restaurant")


@router.patch("/restaurants/me/availability", response_model=RestaurantOut)
async def api_set_availability(
    payload: AvailabilityUpdate,
    current_user: UserOut = Depends(require_cook),
    store: DocumentStore = Depends(get_store),
):
    try:
        return await set_availability(store, current_user, payload.is_available)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except Exception:
        logger.exception("Error updating availability")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Could not update availability")
