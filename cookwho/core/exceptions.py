from fastapi import HTTPException, Request
from cookwho.utils.logger import get_logger
from fastapi.responses import JSONResponse

logger = get_logger("Global_Exception")

async def global_exception_handler(request: Request, exc: Exception):
    logger.exception(
        "Unhandled exception",
        extra={"path": request.url.path}
    )
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"}
    )

class AppException(HTTPException):
    def __init__(self, status_code: int, detail: str):
        super().__init__(status_code=status_code, detail=detail)

class BasketConflictError(Exception):
    """Basket holds items from another restaurant and clearing was not confirmed."""

    def __init__(self, current_restaurant_id: str, new_restaurant_id: str):
        self.current_restaurant_id = current_restaurant_id
        self.new_restaurant_id = new_restaurant_id
        super().__init__(
            "Your current basket contains items from a different restaurant. "
            "Confirm to clear it and start a new one with this item."
        )

class CheckoutError(Exception):
    pass
