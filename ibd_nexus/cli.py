"""CLI commands for IBD Nexus."""

import argparse
import asyncio
import logging
import sys

from ibd_nexus.config import settings
from ibd_nexus.database import SessionLocal, init_db
from ibd_nexus.models import JournalEntry, JournalFilter, SortOrder, TimeWindow
from ibd_nexus.services.ai_service import (
    JournalAIService,
    RateLimitError,
    ServiceUnavailableError,
    UnreadableImageError,
    image_file_to_data_url,
)
from ibd_nexus.services.dashboard_service import dashboard_service
from ibd_nexus.services.entry_store import EntryStore
from ibd_nexus.services.food_trigger_service import food_trigger_service
from ibd_nexus.services.journal_filter_service import journal_filter_service
from ibd_nexus.services.journal_service import JournalService
from ibd_nexus.services.streak_service import streak_service
from ibd_nexus.services.trend_service import TrendService


logger = logging.getLogger(__name__)


def _format_entry(entry: JournalEntry) -> str:
    s = entry.summary
    lines = [
        f"[{entry.id}] {entry.date.astimezone():%Y-%m-%d %H:%M}",
        f"  {entry.transcription}",
        f"  wellness {s.mental_wellness_score}/10, flare-up risk {s.flare_up_risk}%",
    ]
    if s.physical_symptoms:
        lines.append(f"  symptoms: {', '.join(s.physical_symptoms)}")
    if s.moods:
        lines.append(f"  moods: {', '.join(s.moods)}")
    if s.food_eaten:
        lines.append(f"  food: {', '.join(s.food_eaten)}")
    if entry.has_analyzed_photo:
        flag = "red areas detected" if entry.image_analysis.has_red_flags else "no red areas"
        lines.append(f"  photo: {flag}")
    return "\n".join(lines)


# =============================================================================
# ANALYTICS COMMANDS
# =============================================================================


def show_dashboard(store: EntryStore, window: TimeWindow) -> None:
    snapshot = dashboard_service.snapshot(store.entries, window)
    print(f"Dashboard ({window.value})")
    if not snapshot.has_data:
        print("No entries in this period.")
    else:
        print(f"Entries: {snapshot.entry_count}")
        print(f"Average wellness: {snapshot.avg_wellness:.1f}/10 ({snapshot.wellness_trend.name.lower()})")
        print(f"Average flare-up risk: {snapshot.avg_risk:.0f}% ({snapshot.risk_level.value})")
        d = snapshot.digestive
        print(
            f"Photos: {d.total_photos} ({d.red_flag_count} with red areas), "
            f"blood reported {d.reported_blood_count}x, severe cramps {d.high_cramps_days}x"
        )

    print(f"Logging streak: {streak_service.current_streak(store.entries)} day(s)")
    foods = food_trigger_service.analyze(store.entries)
    if foods.top_safe_food:
        print(f"Top safe food: {foods.top_safe_food.name}")
    if foods.top_trigger_food:
        print(f"Top potential trigger: {foods.top_trigger_food.name}")


def show_foods(store: EntryStore) -> None:
    analysis = food_trigger_service.analyze(store.entries)
    if not analysis.has_enough_data:
        print(
            f"Not enough data yet: log food in {analysis.entries_needed} more "
            f"entr{'y' if analysis.entries_needed == 1 else 'ies'} to see food insights."
        )
        return

    print(f"Analyzed {analysis.unique_food_count} foods across {analysis.entries_with_food} entries")
    for title, bucket in (
        ("Safe foods", analysis.safe),
        ("Use caution", analysis.caution),
        ("Potential triggers", analysis.trigger),
    ):
        print(f"\n{title}:")
        if not bucket:
            print("  (none)")
        for stat in bucket:
            print(f"  {stat.name}: {stat.symptom_free_percent}% symptom-free ({stat.total} times)")


def show_streak(store: EntryStore) -> None:
    print(f"Logging streak: {streak_service.current_streak(store.entries)} day(s)")


def show_journal(store: EntryStore, criteria: JournalFilter) -> None:
    entries = journal_filter_service.apply(store.entries, criteria)
    if not entries:
        print("No entries match the current filters.")
        return
    for entry in entries:
        print(_format_entry(entry))
        print()


# =============================================================================
# AI COMMANDS
# =============================================================================


async def add_entry(store: EntryStore, ai: JournalAIService, text: str, image_path=None) -> None:
    journal = JournalService(ai)
    image_url = image_file_to_data_url(image_path) if image_path else None
    summary = await journal.draft_summary(text)
    entry = await journal.save_entry(store, text, summary, image_url=image_url)
    print("Entry saved:")
    print(_format_entry(entry))


async def attach_photo(store: EntryStore, ai: JournalAIService, entry_id: str, image_path: str) -> None:
    entry = await JournalService(ai).attach_image(
        store, entry_id, image_file_to_data_url(image_path)
    )
    if entry is None:
        print(f"Error: No journal entry with id '{entry_id}'.")
        sys.exit(1)
    print("Photo attached:")
    print(_format_entry(entry))


async def show_trends(store: EntryStore, ai: JournalAIService) -> None:
    service = TrendService(ai)
    report = await service.build_report(store.entries)
    if not report.has_enough_data:
        print(report.message)
        return

    a = report.analysis
    for metric, higher_is_better in ((a.risk_trend, False), (a.wellness_trend, True)):
        assessment = service.assess_change(metric, higher_is_better)
        print(
            f"{metric.metric}: {metric.start_value:g} -> {metric.end_value:g} "
            f"({metric.change_percent:+.1f}%, {assessment.value}) [{metric.timeframe}]"
        )
    print(f"High-risk food: {a.correlation_insights.high_risk_food_trigger}")
    print(f"High-risk mood: {a.correlation_insights.high_risk_mood_trigger}")
    print(
        f"Most frequent stool type: {a.stool_pattern.most_frequent_type}, "
        f"blood reported {a.stool_pattern.blood_in_stool_count}x"
    )
    if a.overall_interpretation:
        print(a.overall_interpretation)


async def scan_menu(ai: JournalAIService, image_path: str) -> None:
    result = await ai.scan_menu(image_file_to_data_url(image_path), settings.dietary_profile)
    for item in result.items:
        print(f"[{item.risk.upper()}] {item.item_name}: {item.reason}")
        if item.suggestion:
            print(f"  suggestion: {item.suggestion}")


async def scan_ingredients(ai: JournalAIService, image_path: str) -> None:
    result = await ai.scan_ingredients(image_file_to_data_url(image_path), settings.dietary_profile)
    for ingredient in result.ingredients:
        print(f"[{ingredient.risk.upper()}] {ingredient.ingredient_name}: {ingredient.reason}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="IBD Nexus health journal CLI")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    dashboard_parser = subparsers.add_parser("dashboard", help="Show the dashboard")
    dashboard_parser.add_argument(
        "--window",
        choices=[w.value for w in TimeWindow],
        default=TimeWindow.LAST_7_DAYS.value,
        help="Time window (default 7d)",
    )

    subparsers.add_parser("foods", help="Show safe foods and potential triggers")
    subparsers.add_parser("streak", help="Show the logging streak")

    journal_parser = subparsers.add_parser("journal", help="List journal entries")
    journal_parser.add_argument("--symptom", help="Only entries with this symptom")
    journal_parser.add_argument("--mood", help="Only entries with this mood")
    journal_parser.add_argument(
        "--oldest-first", action="store_true", help="Sort oldest entries first"
    )

    add_parser = subparsers.add_parser("add", help="Add a journal entry")
    add_parser.add_argument("text", help="Journal entry text")
    add_parser.add_argument("--image", help="Path to a stool photo")

    attach_parser = subparsers.add_parser("attach", help="Attach a photo to an entry")
    attach_parser.add_argument("entry_id", help="Journal entry id")
    attach_parser.add_argument("path", help="Path to a stool photo")

    subparsers.add_parser("trends", help="Run the AI trend analysis")

    menu_parser = subparsers.add_parser("scan-menu", help="Scan a menu photo")
    menu_parser.add_argument("path", help="Path to the menu photo")

    ingredients_parser = subparsers.add_parser(
        "scan-ingredients", help="Scan an ingredient label photo"
    )
    ingredients_parser.add_argument("path", help="Path to the label photo")

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    init_db()
    store = EntryStore(SessionLocal)
    store.load()

    try:
        if args.command == "dashboard":
            show_dashboard(store, TimeWindow(args.window))
        elif args.command == "foods":
            show_foods(store)
        elif args.command == "streak":
            show_streak(store)
        elif args.command == "journal":
            criteria = JournalFilter(
                symptom=args.symptom,
                mood=args.mood,
                order=SortOrder.OLDEST_FIRST if args.oldest_first else SortOrder.NEWEST_FIRST,
            )
            show_journal(store, criteria)
        elif args.command == "add":
            asyncio.run(add_entry(store, JournalAIService(), args.text, args.image))
        elif args.command == "attach":
            asyncio.run(attach_photo(store, JournalAIService(), args.entry_id, args.path))
        elif args.command == "trends":
            asyncio.run(show_trends(store, JournalAIService()))
        elif args.command == "scan-menu":
            asyncio.run(scan_menu(JournalAIService(), args.path))
        elif args.command == "scan-ingredients":
            asyncio.run(scan_ingredients(JournalAIService(), args.path))
    except UnreadableImageError as e:
        logger.warning("%s: image could not be read: %s", args.command, e)
        print(f"Error: {e}")
        sys.exit(1)
    except (ServiceUnavailableError, RateLimitError) as e:
        logger.error("%s: AI service failed: %s", args.command, e)
        print(f"Error: {e}")
        sys.exit(2)
    except (ValueError, OSError) as e:
        logger.error("%s failed: %s", args.command, e)
        print(f"Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
