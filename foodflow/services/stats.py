# foodflow/services/stats.py
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
from datetime import datetime
from io import BytesIO
from typing import Optional

from ..repos.base import ListingRepo
from ..schemas import ListingStats, utcnow


async def listing_stats(repo: ListingRepo, now: Optional[datetime] = None) -> ListingStats:
    counts = await repo.listing_counts(now or utcnow())
    return ListingStats(**counts, claims=await repo.count_claims())


def render_stats_png(stats: ListingStats) -> BytesIO:
    """
    Bar chart of the dashboard counts. Returns a BytesIO PNG buffer.
    """
    labels = ["Available", "Claimed", "Expired"]
    values = [stats.available, stats.claimed, stats.expired]

    fig, ax = plt.subplots(figsize=(6, 3))
    ax.bar(labels, values, color=["#4caf50", "#2196f3", "#9e9e9e"])
    ax.set_title(f"Donations ({stats.total} total, {stats.quantity_claimed} units claimed)")
    fig.tight_layout()

    buf = BytesIO()
    fig.savefig(buf, format="png")
    plt.close(fig)
    buf.seek(0)
    return buf
