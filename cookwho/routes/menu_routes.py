from fastapi import APIRouter, Depends, HTTPException, status, Body, Path
from typing import List, Optional
from cookwho.core.dependencies import get_store, require_admin, require_cook
from cookwho.db.document_store import DocumentStore
from cookwho.models.menu import CookMenuItem, Cuisine, MasterMenuCategory, MasterMenuCategoryCreate, MenuItemCreate, MenuItemUpdate
from cookwho.models.user import UserOut
from cookwho.services.menu_service import (
    create_category, create_menu_item, delete_category, delete_menu_item, list_categories, list_menu_items, update_menu_item,
)
from cookwho.utils.logger import get_logger

logger = get_logger("Menu_Route")
router = APIRouter(tags=["Menu"])

# Public: master menu, optionally for one cuisine
@router.get("/categories", response_model=List[MasterMenuCategory])
async def api_list_categories(store: DocumentStore = Depends(get_store)):
    return await list_categories(store)

@router.get("/categories/{cuisine}", response_model=List[MasterMenuCategory])
async def api_list_cuisine_categories(cuisine: Cuisine, store: DocumentStore = Depends(get_store)):
    return await list_categories(store, cuisine)

# Admin: manage master menu
@router.post("/categories", response_model=MasterMenuCategory, status_code=status.HTTP_201_CREATED)
async def api_create_category(payload: MasterMenuCategoryCreate = Body(...), current_admin: UserOut = Depends(require_admin),
                              store: DocumentStore = Depends(get_store)):
    try:
        return await create_category(store, payload, actor_email=current_admin.email)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except Exception:
        logger.exception("Error creating category")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal Server Error")

@router.delete("/categories/{category_id}")
async def api_delete_category(category_id: str, current_admin: UserOut = Depends(require_admin),
                              store: DocumentStore = Depends(get_store)):
    try:
        return await delete_category(store, category_id, actor_email=current_admin.email)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except Exception:
        logger.exception("Error deleting category")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal Server Error")

# Public: a cook's menu
@router.get("/restaurants/{restaurant_id}/menu", response_model=List[CookMenuItem])
async def api_list_menu(restaurant_id: str = Path(...), category: Optional[str] = None,
                        store: DocumentStore = Depends(get_store)):
    return await list_menu_items(store, restaurant_id, category)

# Cook: manage own menu
@router.post("/restaurants/me/menu", response_model=CookMenuItem, status_code=status.HTTP_201_CREATED)
async def api_create_menu_item(payload: MenuItemCreate = Body(...), current_user: UserOut = Depends(require_cook),
                               store: DocumentStore = Depends(get_store)):
    try:
        return await create_menu_item(store, current_user.id, payload, actor_email=current_user.email)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception:
        logger.exception("Error creating menu item")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal Server Error")

@router.patch("/restaurants/me/menu/{item_id}", response_model=CookMenuItem)
async def api_update_menu_item(item_id: str, payload: MenuItemUpdate = Body(...), current_user: UserOut = Depends(require_cook),
                               store: DocumentStore = Depends(get_store)):
    try:
        return await update_menu_item(store, current_user.id, item_id, payload, actor_email=current_user.email)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except Exception:
        logger.exception("Error updating menu item")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal Server Error")

@router.delete("/restaurants/me/menu/{item_id}")
async def api_delete_menu_item(item_id: str, current_user: UserOut = Depends(require_cook),
                               store: DocumentStore = Depends(get_store)):
    try:
        return await delete_menu_item(store, current_user.id, item_id, actor_email=current_user.email)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except Exception:
        logger.exception("Error deleting menu item")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal Server Error")
