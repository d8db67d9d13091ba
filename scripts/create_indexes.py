# scripts/create_indexes.py
import asyncio

from foodflow.core.config import get_settings
from foodflow.repos.mongo import MongoRepo


async def main():
    settings = get_settings()
    repo = MongoRepo.from_uri(settings.mongo_uri, settings.mongo_db)
    try:
        await repo.ensure_indexes()
    finally:
        await repo.close()
    print(f"Indexes ensured on {settings.mongo_db}")


if __name__ == "__main__":
    asyncio.run(main())
