from fastapi import APIRouter, HTTPException, status
from cookwho.utils.geocode import geocode_postcode, GeocodeError

router = APIRouter(prefix="/geocode", tags=["Geocode"])

@router.get("/{postcode}")
async def api_geocode(postcode: str):
    try:
        return await geocode_postcode(postcode)
    except GeocodeError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
