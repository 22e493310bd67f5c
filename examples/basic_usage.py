"""Basic usage examples for GuestInsight."""

import asyncio
from pathlib import Path

from guestinsight import AnalysisServiceFactory, aggregate, local_analyze_sentiment
from guestinsight.core.insights import AnalysisStrategy, InsightEngine
from guestinsight.core.reviews import build_review
from guestinsight.utils.data_prep import load_reviews

SAMPLE = Path(__file__).parent / "sample_reviews.json"


def example_dashboard():
    """Example: Dashboard metrics for a reviews file."""
    reviews = load_reviews(str(SAMPLE))
    metrics = aggregate(reviews)
    print(f"📊 {metrics.total_reviews} reviews, sentiment {metrics.overall_sentiment}, rating {metrics.average_rating}/5")
    for m in metrics.monthly_rollups:
        print(f"  {m.month}: {m.sentiment:.2f} ({m.count} reviews)")


def example_local_insights():
    """Example: Local insights."""
    reviews = load_reviews(str(SAMPLE))
    bundle = InsightEngine(AnalysisStrategy.LOCAL).derive_local(reviews)
    print(f"🏆 Top aspects: {[a.aspect for a in bundle.top_aspects]}")
    for trend in bundle.trends:
        print(f"  📈 {trend.message}")
    for anomaly in bundle.anomalies:
        print(f"  ⚠️ {anomaly.date}: {anomaly.message}")
    for rec in bundle.recommendations:
        print(f"  💡 {rec.aspect}: {rec.action}")


def example_new_review():
    """Example: Analyse a new review and add it to the collection."""
    text = "The room was dirty and the staff was rude"
    sentiment = local_analyze_sentiment(text)
    review = build_review(text, sentiment, country="Germany", reviewer="Guest")
    print(f"📝 {review.id}: {sentiment.summary} ({sentiment.estimated_rating}/5)")


async def example_remote_insights():
    """Example: Remote insights, falling back to local when the API fails."""
    reviews = load_reviews(str(SAMPLE))
    engine = AnalysisServiceFactory.create_insight_engine(strategy="remote")
    result = await engine.derive(reviews)
    if result.fallback_used:
        print(f"🔁 Remote insights failed ({result.error}), local insights used")
    print(f"🤖 {len(result.unwrap().recommendations)} recommendations from {result.source}")


if __name__ == "__main__":
    example_dashboard()
    example_local_insights()
    example_new_review()
    asyncio.run(example_remote_insights())
