# foodflow/routers/stats.py
from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from ..deps import get_repo
from ..services.stats import listing_stats, render_stats_png

router = APIRouter(prefix="/stats", tags=["stats"])


@router.get("/overview")
async def overview(repo=Depends(get_repo)):
    return {"success": True, "data": await listing_stats(repo)}


@router.get("/plots/listings.png")
async def listings_plot(repo=Depends(get_repo)):
    buf = render_stats_png(await listing_stats(repo))
    return StreamingResponse(buf, media_type="image/png")
