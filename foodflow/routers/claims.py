# foodflow/routers/claims.py
from fastapi import APIRouter, Depends

from ..core.security import get_user_id
from ..deps import get_repo
from ..services.listings import list_claims_for

router = APIRouter(prefix="/claims", tags=["claims"])


@router.get("/mine")
async def my_claims(user_id: str = Depends(get_user_id), repo=Depends(get_repo)):
    items = await list_claims_for(repo, user_id)
    return {"success": True, "data": items, "count": len(items)}
