"""Loading review collections and preparing results for export."""

import datetime
import json
import logging
from typing import Dict, Any, List, Optional

from ..core.constants import FileConstants
from ..core.models import Review, DashboardMetrics, InsightBundle

logger = logging.getLogger(__name__)


def load_reviews(filename: str) -> List[Review]:
    """Load reviews from a JSON file holding an array of camelCase review objects.

    A top-level object with a ``reviews`` array is accepted too.
    """
    with open(filename, "r", encoding="utf-8") as f:
        data = json.load(f)
    if isinstance(data, dict):
        data = data.get("reviews", [])
    if not isinstance(data, list):
        raise ValueError(f"{filename} does not contain a list of reviews")

    reviews = [Review.from_dict(item) for item in data]
    logger.info(f"Loaded {len(reviews)} reviews from {filename}")
    return reviews


def prepare_export(
    metrics: Optional[DashboardMetrics] = None,
    insights: Optional[InsightBundle] = None,
    reviews: Optional[List[Review]] = None,
    source: Optional[str] = None,
) -> Dict[str, Any]:
    """Prepare data for JSON export."""
    export_data: Dict[str, Any] = {}
    if metrics is not None:
        export_data["dashboard"] = metrics.to_dict()
    if insights is not None:
        export_data["insights"] = insights.to_dict()
    if reviews is not None:
        export_data["reviews"] = [r.to_dict() for r in reviews]
    export_data["metadata"] = {
        "export_timestamp": None,  # set by export_to_json
        "source": source,
        "version": "1.0.0",
    }
    return export_data


def export_to_json(data: Dict[str, Any], filename: str) -> None:
    """Export data to JSON file."""
    data.setdefault("metadata", {})["export_timestamp"] = datetime.datetime.now().isoformat()

    with open(filename, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=FileConstants.JSON_INDENT, ensure_ascii=False)
    logger.info(f"Exported results to {filename}")
