# services/restaurant_service.py
import asyncio
from typing import Callable, Iterable, List, Optional, Set

from cookwho.db.bindings import CollectionBinding
from cookwho.db.document_store import DocumentStore
from cookwho.db.documents import Query, collection, doc, menu_items_path, RESTAURANTS, USERS
from cookwho.db.mutations import CollectionMutations
from cookwho.models.restaurant import RestaurantUpsert
from cookwho.models.user import UserOut
from cookwho.settings.config import settings
from cookwho.utils.geo import calculate_distance
from cookwho.utils.geocode import geocode_postcode
from cookwho.utils.logger import get_logger

logger = get_logger("Restaurant_Service")

LOCATION_ERROR = (
    "Could not get your location. Please ensure location services are enabled "
    "and permissions are granted."
)

def available_restaurants_query() -> Query:
    return collection(RESTAURANTS).where("is_available", True)

def distance_km(location: Optional[dict], restaurant: dict) -> Optional[float]:
    if not location or restaurant.get("latitude") is None or restaurant.get("longitude") is None:
        return None
    return calculate_distance(
        location["latitude"], location["longitude"],
        restaurant["latitude"], restaurant["longitude"]
    ) / 1000

def filter_restaurants(restaurants: Iterable[dict], location: Optional[dict] = None,
                       max_distance: Optional[float] = None,
                       restaurant_ids_with_item: Optional[Set[str]] = None) -> List[dict]:
    """
    Available restaurants only; when restaurant_ids_with_item is given, only those ids.
    With a known location: drops restaurants without coordinates, attaches "distance"
    in km, applies max_distance (km) and sorts nearest first. Without a location the
    input order is kept and max_distance is ignored.
    """
    out = [r for r in restaurants if r.get("is_available")]
    if restaurant_ids_with_item is not None:
        out = [r for r in out if r["id"] in restaurant_ids_with_item]

    if not location:
        return [{**r, "distance": None} for r in out]

    with_distance = []
    for r in out:
        d = distance_km(location, r)
        if d is None:
            continue
        with_distance.append({**r, "distance": d})
    if max_distance is not None:
        with_distance = [r for r in with_distance if r["distance"] <= max_distance]
    with_distance.sort(key=lambda r: r["distance"])
    return with_distance

async def find_restaurants_with_category(store: DocumentStore, restaurants: Iterable[dict],
                                         category_id: str, concurrency: Optional[int] = None) -> Set[str]:
    """
    Ids of the restaurants whose menu has an item under category_id. One existence
    query per restaurant, run concurrently (bounded) and joined. A lookup that fails
    is logged and counts as "no match" for that restaurant only.
    """
    semaphore = asyncio.Semaphore(concurrency or settings.CATEGORY_LOOKUP_CONCURRENCY)

    async def check(restaurant: dict) -> Optional[str]:
        query = collection(menu_items_path(restaurant["id"])).where("master_category_id", category_id)
        async with semaphore:
            try:
                found = await store.exists(query)
            except Exception as e:
                logger.warning(f"Menu lookup failed for restaurant {restaurant['id']}: {e}")
                return None
        return restaurant["id"] if found else None

    results = await asyncio.gather(*(check(r) for r in restaurants))
    return {rid for rid in results if rid is not None}

async def list_restaurants(store: DocumentStore, location: Optional[dict] = None,
                           max_distance: Optional[float] = None, category_id: Optional[str] = None) -> List[dict]:
    """One-shot version of RestaurantDirectory."""
    restaurants = await store.get_documents(available_restaurants_query())
    ids = None
    if category_id:
        ids = await find_restaurants_with_category(store, restaurants, category_id)
    return filter_restaurants(restaurants, location, max_distance, ids)


class RestaurantDirectory:
    """
    Live list of restaurants to display. Watches the available restaurants and,
    on every snapshot, re-runs the category check and filter, then hands the
    result to publish(). Results finishing after close() are dropped.
    """

    def __init__(self, store: DocumentStore, publish: Callable[[List[dict]], None],
                 location: Optional[dict] = None, max_distance: Optional[float] = None,
                 category_id: Optional[str] = None):
        self.store = store
        self.publish = publish
        self.location = location
        self.max_distance = max_distance
        self.category_id = category_id
        self.binding = CollectionBinding(store, on_change=self._on_snapshot)
        self.closed = False
        self._tasks: Set[asyncio.Task] = set()
        self._generation = 0

    def start(self):
        self.binding.bind(available_restaurants_query())
        return self

    def _on_snapshot(self, binding: CollectionBinding):
        if binding.loading or self.closed:
            return
        restaurants = binding.data or []
        self._generation += 1
        if not self.category_id:
            self.publish(filter_restaurants(restaurants, self.location, self.max_distance))
            return
        task = asyncio.get_running_loop().create_task(self._refresh(restaurants, self._generation))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _refresh(self, restaurants: List[dict], generation: int):
        ids = await find_restaurants_with_category(self.store, restaurants, self.category_id)
        # a newer snapshot or close() makes this result stale
        if self.closed or generation != self._generation:
            return
        self.publish(filter_restaurants(restaurants, self.location, self.max_distance, ids))

    async def wait_idle(self):
        """Waits for in-flight category checks."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    def close(self):
        self.closed = True
        self.binding.close()


async def get_cook_page(store: DocumentStore, user_id: str, location: Optional[dict] = None,
                        category_id: Optional[str] = None) -> Optional[dict]:
    """Restaurant, cook and menu for /cooks/{user_id}; None when either record is missing."""
    restaurant = await store.get_document(doc(RESTAURANTS, user_id))
    cook = await store.get_document(doc(USERS, user_id))
    if not restaurant or not cook:
        return None
    query = collection(menu_items_path(user_id))
    if category_id:
        query = query.where("master_category_id", category_id)
    menu_items = await store.get_documents(query)
    distance = distance_km(location, restaurant)
    return {
        "restaurant": {**restaurant, "distance": distance},
        "cook": cook,
        "menu_items": menu_items,
        "distance": distance,
    }

async def upsert_my_restaurant(store: DocumentStore, cook: UserOut, payload: RestaurantUpsert) -> dict:
    """
    Restaurants are keyed by their owner's user id. A postcode is geocoded into
    coordinates; without one the cook's own coordinates are used.
    GeocodeError propagates to the caller.
    """
    data = payload.model_dump(exclude={"postcode"})
    data.update({"user_id": cook.id, "email": cook.email})
    if payload.postcode:
        data.update(await geocode_postcode(payload.postcode))
    else:
        data.update({"latitude": cook.latitude, "longitude": cook.longitude})

    existing = await store.get_document(doc(RESTAURANTS, cook.id))
    if existing:
        data["rating"] = existing.get("rating")
    mutations = CollectionMutations(store, RESTAURANTS)
    await mutations.set_document(cook.id, data)
    logger.info("Restaurant saved", extra={"restaurant_id": cook.id})
    return {**data, "id": cook.id}

async def set_availability(store: DocumentStore, cook: UserOut, is_available: bool) -> dict:
    mutations = CollectionMutations(store, RESTAURANTS)
    await mutations.update_document(cook.id, {"is_available": is_available})
    logger.info(f"Restaurant {cook.id} availability set to {is_available}")
    return await store.get_document(doc(RESTAURANTS, cook.id))
