from datetime import datetime, timezone

from cookwho.db.document_store import DocumentStore
from cookwho.db.documents import collection, doc, USERS
from cookwho.db.mutations import CollectionMutations
from cookwho.models.user import UserCreate, UserOut
from cookwho.utils.geocode import geocode_postcode, GeocodeError
from cookwho.utils.hash import hash_password, verify_password
from cookwho.utils.logger import get_logger

logger = get_logger("USER_SERVICE")

async def create_user(store: DocumentStore, user: UserCreate) -> UserOut:
    logger.info(f"User create request received for email: {user.email}")
    if await store.exists(collection(USERS).where("email", user.email)):
        raise ValueError("Email already registered")
    if await store.exists(collection(USERS).where("username", user.username)):
        raise ValueError("Username already taken")

    user_dict = {
        "username": user.username,
        "display_name": user.display_name,
        "email": user.email,
        "password": hash_password(user.password),
        "mobile": user.mobile,
        "postcode": user.postcode,
        "latitude": None,
        "longitude": None,
        "is_cook": user.is_cook,
        "is_admin": False,
        "created_at": datetime.now(timezone.utc),
    }
    if user.postcode:
        try:
            user_dict.update(await geocode_postcode(user.postcode))
        except GeocodeError as e:
            # account still gets created, location can be set later
            logger.warning(f"Could not geocode postcode for {user.email}: {e}")

    ref = await CollectionMutations(store, USERS).add_document(user_dict)
    logger.info(f"User inserted with id: {ref.id}")
    return UserOut(id=ref.id, **{k: v for k, v in user_dict.items() if k != "password"})

async def authenticate(store: DocumentStore, email: str, password: str) -> dict | None:
    """Returns the stored user record when the credentials match, else None."""
    users = await store.get_documents(collection(USERS).where("email", email).take(1))
    if not users:
        logger.warning(f"Login failed: user not found {email}")
        return None
    user = users[0]
    if not verify_password(password, user["password"]):
        logger.warning(f"Login failed: wrong password {email}")
        return None
    return user

async def get_user(store: DocumentStore, user_id: str) -> UserOut | None:
    user = await store.get_document(doc(USERS, user_id))
    return UserOut(**user) if user else None
