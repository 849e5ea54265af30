# scripts/seed_admin.py
import asyncio
from datetime import datetime, timezone
from cookwho.db.db_operation import get_document_store
from cookwho.db.documents import collection, MASTER_MENU_CATEGORIES, USERS
from cookwho.db.mutations import CollectionMutations
from cookwho.utils.hash import hash_password

DEFAULT_CATEGORIES = {
    "English": ["Full Breakfast", "Fish and Chips", "Sunday Roast", "Shepherd's Pie"],
    "Indian": ["Chicken Curry", "Biryani", "Dal", "Samosa"],
    "Italian": ["Lasagne", "Margherita Pizza", "Risotto", "Tiramisu"],
}

async def seed():
    store = get_document_store()
    admin_email = "admin@cookwho.app"
    if not await store.exists(collection(USERS).where("email", admin_email)):
        admin_doc = {
            "username": "admin",
            "display_name": "CookWho Admin",
            "email": admin_email,
            "password": hash_password("Admin@123"),
            "is_cook": False,
            "is_admin": True,
            "created_at": datetime.now(timezone.utc),
        }
        ref = await CollectionMutations(store, USERS).add_document(admin_doc)
        print("Created admin:", admin_email, ref.id)
    else:
        print("Admin already exists")

    categories = CollectionMutations(store, MASTER_MENU_CATEGORIES)
    for cuisine, names in DEFAULT_CATEGORIES.items():
        for name in names:
            query = collection(MASTER_MENU_CATEGORIES).where("cuisine", cuisine).where("name", name)
            if not await store.exists(query):
                await categories.add_document({"name": name, "cuisine": cuisine})
    print("Master menu categories seeded")

if __name__ == "__main__":
    asyncio.run(seed())
