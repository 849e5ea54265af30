from fastapi import FastAPI
from cookwho.settings.config import settings
from cookwho.db.db_operation import create_indexes
from cookwho.core.exceptions import global_exception_handler
from cookwho.utils.logger import get_logger
from cookwho.routes import auth, basket_routes, checkout_routes, geocode_routes, menu_routes, restaurant_routes, user_routes

logger = get_logger("main")

app = FastAPI(title="CookWho API", version="1.0.0")

@app.get("/")
async def health_check():
    logger.info("Health check is successful")
    return {
        "status": "ok",
        "app": settings.PROJECT_NAME,
        "message": "FastAPI is running"
    }

@app.on_event("startup")
async def startup_event():
    await create_indexes()

app.add_exception_handler(Exception, global_exception_handler)
app.include_router(auth.router)
app.include_router(user_routes.router)
app.include_router(restaurant_routes.router)
app.include_router(menu_routes.router)
app.include_router(basket_routes.router)
app.include_router(checkout_routes.router)
app.include_router(geocode_routes.router)
