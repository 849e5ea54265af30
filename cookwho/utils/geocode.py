from urllib.parse import quote

import httpx

from cookwho.settings.config import settings
from cookwho.utils.logger import get_logger

logger = get_logger("Geocode")


class GeocodeError(Exception):
    pass


async def geocode_postcode(postcode: str, client: httpx.AsyncClient | None = None) -> dict:
    """
    Look up a UK postcode on postcodes.io.
    Returns {"latitude": ..., "longitude": ...}; raises GeocodeError on any failure.
    """
    postcode = postcode.strip()
    if not postcode:
        raise GeocodeError("Postcode is required")
    url = f"{settings.GEOCODE_BASE_URL}/{quote(postcode)}"
    logger.info(f"Geocoding postcode {postcode}")
    try:
        if client is None:
            async with httpx.AsyncClient(timeout=settings.GEOCODE_TIMEOUT_SECONDS) as own_client:
                response = await own_client.get(url)
        else:
            response = await client.get(url)
    except httpx.HTTPError as e:
        logger.error(f"Geocoding request failed for {postcode}: {e}")
        raise GeocodeError(f"Failed to geocode postcode: {e}") from e

    if response.status_code != 200:
        raise GeocodeError(f"Failed to geocode postcode: {response.reason_phrase}")
    try:
        data = response.json()
    except ValueError as e:
        logger.error(f"Geocoding response for {postcode} was not JSON")
        raise GeocodeError("Failed to geocode postcode: unreadable response") from e
    if data.get("status") != 200 or not data.get("result"):
        raise GeocodeError(f"Failed to geocode postcode: {data.get('error')}")
    return {
        "latitude": data["result"]["latitude"],
        "longitude": data["result"]["longitude"],
    }
