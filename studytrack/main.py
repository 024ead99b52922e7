"""Command line entry point for studytrack

Usage:
    studytrack complete        # a study task was checked off
    studytrack session         # a focused work session finished (+50 XP)
    studytrack xp 25           # award XP directly
    studytrack badge night-owl # award a badge
    studytrack status          # show streak, XP and badges
    studytrack wipe --yes      # delete all saved progress
"""
import argparse
import asyncio
import json
import logging
import sys
from typing import Any, Optional, Sequence

from studytrack.config import validate_config, LOG_LEVEL
from studytrack.exceptions import StudyTrackError
from studytrack.models.events import Event
from studytrack.monitoring import init_sentry, shutdown_sentry
from studytrack.services.container import ServiceContainer, init_container

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="studytrack", description="Study streaks, XP and badges")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("complete", help="Record a completed study task for today")
    sub.add_parser("session", help="Record a finished focused work session")

    xp = sub.add_parser("xp", help="Award XP")
    xp.add_argument("amount", help="XP to add (whole, non-negative)")

    badge = sub.add_parser("badge", help="Award a badge")
    badge.add_argument("badge_id")

    sub.add_parser("status", help="Show current progress")

    wipe = sub.add_parser("wipe", help="Delete all saved progress")
    wipe.add_argument("--yes", action="store_true", help="Confirm deletion")

    return parser


def _parse_amount(text: str) -> Any:
    """Numbers stay numbers; anything else is passed on and rejected by the ledger"""
    for convert in (int, float):
        try:
            return convert(text)
        except ValueError:
            continue
    return text


async def run(args: argparse.Namespace, container: ServiceContainer) -> dict:
    service = container.progress_service

    def on_event(event: Event) -> None:
        if event.type == "level_up":
            print(f"🎉 Level up! {event.old_level} → {event.new_level}", file=sys.stderr)
        elif event.type == "streak_saved_by_break":
            print(f"🛡️ Streak saved by your weekly break (missed {event.missed_date})", file=sys.stderr)
        elif event.type == "persistence_warning":
            print(f"⚠️ Progress not saved: {event.error}", file=sys.stderr)

    container.dispatcher.subscribe("*", on_event)

    if args.command == "complete":
        return await service.process_task_completion()
    if args.command == "session":
        return await service.process_work_session()
    if args.command == "xp":
        result = await container.ledger.add_xp(_parse_amount(args.amount))
        return result.model_dump()
    if args.command == "badge":
        result = await container.ledger.award_badge_detailed(args.badge_id)
        return result.model_dump()
    if args.command == "status":
        return await service.get_progress()
    if args.command == "wipe":
        if not args.yes:
            return {"deleted": {}, "message": "Refusing to wipe without --yes"}
        return await service.wipe_progress()
    raise ValueError(f"Unknown command {args.command}")


async def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main application entry point"""
    args = build_parser().parse_args(argv)
    container = None
    try:
        validate_config()
        init_sentry()
        container = init_container()
        result = await run(args, container)
        print(json.dumps(result, indent=2, default=str))
        return 0
    except StudyTrackError as e:
        print(json.dumps(e.to_dict(), indent=2), file=sys.stderr)
        return 1
    finally:
        if container is not None:
            await container.store.close()
        shutdown_sentry()


def cli() -> None:
    # Configure logging
    logging.basicConfig(
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        level=getattr(logging, LOG_LEVEL, logging.INFO)
    )
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    cli()
