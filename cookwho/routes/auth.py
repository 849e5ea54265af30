from fastapi import APIRouter, Depends, HTTPException, status
from pymongo.errors import PyMongoError
from cookwho.core.dependencies import get_store
from cookwho.db.document_store import DocumentStore
from cookwho.models.user import UserCreate, UserOut, UserLogin
from cookwho.services.user_service import create_user, authenticate
from cookwho.utils.jwt_handler import create_access_token
from cookwho.utils.logger import get_logger

logger = get_logger("AUTH_ROUTE")

router = APIRouter(prefix="/auth", tags=["Authentication"])

@router.post("/signup", response_model=UserOut, status_code=status.HTTP_201_CREATED)
async def signup(user: UserCreate, store: DocumentStore = Depends(get_store)):
    logger.info(f"Attempting to sign up user with email: {user.email}")
    try:
        return await create_user(store, user)
    except ValueError as e:
        logger.error(f"Error during user signup: {e}")
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except PyMongoError as e:
        logger.error(f"Database error during user signup: {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Database error")

@router.post("/login")
async def login(user: UserLogin, store: DocumentStore = Depends(get_store)):
    logger.info(f"Login attempt for: {user.email}")
    db_user = await authenticate(store, user.email, user.password)
    if not db_user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")
    access_token = create_access_token({"id": db_user["id"], "sub": db_user["email"]})
    logger.info(f"Login successful: {user.email}")
    return {"access_token": access_token, "token_type": "bearer"}
