# foodflow/deps.py
from fastapi import Request

from .core.config import Settings
from .repos.base import ListingRepo
from .repos.inmemory import InMemoryRepo


def build_repo(settings: Settings) -> ListingRepo:
    if settings.storage == "memory":
        return InMemoryRepo()
    from .repos.mongo import MongoRepo
    return MongoRepo.from_uri(settings.mongo_uri, settings.mongo_db)


def get_repo(request: Request) -> ListingRepo:
    return request.app.state.repo


def app_settings(request: Request) -> Settings:
    return request.app.state.settings
