import argparse

from loguru import logger

from src.config import get_settings
from src.notifications.phone import normalize_phone
from src.scheduler.jobs import run_scheduled_checks

settings = get_settings()


def run_once():
    """Run a single tick of all checks"""
    results = run_scheduled_checks(settings)
    for name, summary in results.items():
        logger.info(f"{name}: {summary}")


def run_worker():
    """Run the checks on the configured interval until interrupted"""
    from src.scheduler.runner import create_scheduler

    scheduler = create_scheduler(settings, blocking=True)
    try:
        scheduler.start()
    except (KeyboardInterrupt, SystemExit):
        logger.info("Worker stopped")


def main():
    parser = argparse.ArgumentParser(description="Poker League Notifier CLI")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # run-once command
    subparsers.add_parser("run-once", help="Run all checks once")

    # worker command
    subparsers.add_parser("worker", help="Run the scheduler in the foreground")

    # serve command
    subparsers.add_parser("serve", help="Start API server with the scheduler")

    # normalize-phone command
    phone_parser = subparsers.add_parser("normalize-phone", help="Show how a phone number is normalized")
    phone_parser.add_argument("number")

    args = parser.parse_args()

    if args.command == "run-once":
        run_once()
    elif args.command == "worker":
        run_worker()
    elif args.command == "serve":
        import uvicorn

        uvicorn.run(
            "src.main:app",
            host=settings.api_host,
            port=settings.api_port,
            reload=settings.debug,
        )
    elif args.command == "normalize-phone":
        print(normalize_phone(args.number, settings.country_code))
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
