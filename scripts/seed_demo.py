# scripts/seed_demo.py
import asyncio

from foodflow.core.config import get_settings
from foodflow.core.security import create_token
from foodflow.deps import build_repo
from foodflow.services.demo import seed_demo


async def main():
    settings = get_settings()
    repo = build_repo(settings)
    try:
        await repo.ensure_indexes()
        seeded = await seed_demo(repo)
    finally:
        await repo.close()

    for role in ("donor", "recipient"):
        user = seeded[role]
        print(f"{role}: {user.name} ({user.id})")
        print(f"  token: {create_token(user.id, settings, minutes=60 * 24)}")
    for listing in seeded["listings"]:
        print(f"listing {listing.id}: {listing.title} x{listing.quantity}")


if __name__ == "__main__":
    asyncio.run(main())
