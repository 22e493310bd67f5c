"""Command-line interface for GuestInsight."""

import argparse
import asyncio
import json
import logging
import sys

from .core.config import settings
from .core.constants import FileConstants
from .core.aggregation import ReviewAggregator
from .core.errors import AnalysisResult
from .core.reviews import filter_reviews, format_month, sentiment_label
from .services.analysis import AnalysisServiceFactory
from .utils.data_prep import export_to_json, load_reviews, prepare_export

logger = logging.getLogger(__name__)


def setup_logging():
    """Setup logging configuration."""
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format=FileConstants.LOG_FORMAT,
    )


def _print_json(data):
    print(json.dumps(data, indent=FileConstants.JSON_INDENT, ensure_ascii=False))


def _report(result: AnalysisResult) -> None:
    """Tell the user where a result came from, including a replaced failure."""
    if result.fallback_used:
        print(f"Remote analysis failed ({result.error}); showing local results.", file=sys.stderr)
    else:
        print(f"Source: {result.source}", file=sys.stderr)


async def _analyze(service, text, fallback):
    try:
        return await service.analyze(text, fallback=fallback)
    finally:
        if service.gateway is not None:
            await service.gateway.close()


async def _derive(engine, reviews, fallback):
    try:
        return await engine.derive(reviews, fallback=fallback)
    finally:
        if engine.gateway is not None:
            await engine.gateway.close()


def cmd_analyze(args):
    """Analyze the sentiment of one review text."""
    service = AnalysisServiceFactory.create_sentiment_service(settings, args.strategy)
    result = asyncio.run(_analyze(service, args.text, not args.no_fallback))
    sentiment = result.unwrap()
    _report(result)
    _print_json(sentiment.to_dict())
    print(f"\n{sentiment_label(sentiment.score)} ({sentiment.estimated_rating}/5)", file=sys.stderr)


def cmd_dashboard(args):
    """Dashboard metrics for a reviews file."""
    reviews = load_reviews(args.input_file)
    metrics = ReviewAggregator().aggregate(reviews)

    if args.out:
        export_to_json(prepare_export(metrics=metrics, source="local"), args.out)
        print(f"Results exported to {args.out}")
        return

    print(f"Reviews: {metrics.total_reviews}")
    print(f"Overall sentiment: {metrics.overall_sentiment}")
    print(f"Average rating: {metrics.average_rating}/5")
    print("\nSentiment by month:")
    for m in metrics.monthly_rollups:
        print(f"  {format_month(m.month)}: {m.sentiment:.2f} sentiment, {m.rating:.1f}/5 ({m.count} reviews)")
    print("\nAspect scores:")
    for a in metrics.aspect_aggregates:
        print(f"  {a.aspect}: {a.score:.2f} ({a.count} mentions)")
    print("\nRatings:")
    for r in metrics.rating_distribution:
        print(f"  {r.rating} stars: {r.count}")
    print("\nTrip types:")
    for c in metrics.trip_type_distribution:
        print(f"  {c.name}: {c.value}")


def cmd_insights(args):
    """Insights for a reviews file."""
    reviews = load_reviews(args.input_file)
    engine = AnalysisServiceFactory.create_insight_engine(settings, args.strategy)
    result = asyncio.run(_derive(engine, reviews, not args.no_fallback))
    bundle = result.unwrap()
    _report(result)

    if args.out:
        export_to_json(prepare_export(insights=bundle, source=result.source), args.out)
        print(f"Results exported to {args.out}")
    else:
        _print_json(bundle.to_dict())


def cmd_reviews(args):
    """List reviews matching filters, newest first."""
    reviews = load_reviews(args.input_file)
    matches = filter_reviews(
        reviews,
        search=args.search,
        rating=args.rating,
        country=args.country,
        trip_type=args.trip_type,
    )
    print(f"Showing {len(matches)} of {len(reviews)} reviews")
    for r in matches:
        print(f"\n{r.date}  {r.rating}/5  {r.reviewer or 'Anonymous'} ({r.country or 'n/a'}, {r.trip_type or 'n/a'})")
        print(f"  {r.text[:200]}")


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(description="GuestInsight - Guest Review Sentiment Dashboard")
    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    strategies = ["local", "remote"]

    # Analyze command
    analyze_parser = subparsers.add_parser('analyze', help='Analyze one review text')
    analyze_parser.add_argument('text', help='Review text')
    analyze_parser.add_argument('--strategy', choices=strategies, help='Analysis strategy (default from settings)')
    analyze_parser.add_argument('--no-fallback', action='store_true', help='Fail instead of using local analysis')

    # Dashboard command
    dashboard_parser = subparsers.add_parser('dashboard', help='Aggregate dashboard metrics')
    dashboard_parser.add_argument('--in', dest='input_file', required=True, help='Reviews JSON file')
    dashboard_parser.add_argument('--out', help='Output JSON file')

    # Insights command
    insights_parser = subparsers.add_parser('insights', help='Derive insights from reviews')
    insights_parser.add_argument('--in', dest='input_file', required=True, help='Reviews JSON file')
    insights_parser.add_argument('--strategy', choices=strategies, help='Analysis strategy (default from settings)')
    insights_parser.add_argument('--no-fallback', action='store_true', help='Fail instead of using local insights')
    insights_parser.add_argument('--out', help='Output JSON file')

    # Reviews command
    reviews_parser = subparsers.add_parser('reviews', help='List and filter reviews')
    reviews_parser.add_argument('--in', dest='input_file', required=True, help='Reviews JSON file')
    reviews_parser.add_argument('--search', default='', help='Text or reviewer search term')
    reviews_parser.add_argument('--rating', type=int, choices=[1, 2, 3, 4, 5], help='Star rating')
    reviews_parser.add_argument('--country', help='Reviewer country')
    reviews_parser.add_argument('--trip-type', dest='trip_type', help='Trip type')

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return

    setup_logging()

    commands = {
        'analyze': cmd_analyze,
        'dashboard': cmd_dashboard,
        'insights': cmd_insights,
        'reviews': cmd_reviews,
    }
    try:
        commands[args.command](args)
    except KeyboardInterrupt:
        print("\nOperation cancelled by user")
    except Exception as e:
        logger.error(f"Command failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
