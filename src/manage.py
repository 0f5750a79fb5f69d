"""Pickup service management CLI.

Creates and drops the database schema, and runs the scheduled sweeps
without going through HTTP.

Usage:
    python src/manage.py setup-db
    python src/manage.py drop-db
    python src/manage.py sweep thank-completed
    python src/manage.py sweep remind-pickup
"""

import argparse
import json
import sys

SWEEPS = ("thank-completed", "remind-pickup")


def setup_database():
    from pickup.domain import pickup
    from pickup.utils.db import setup_db

    print("Initializing pickup domain...")
    pickup.init()
    print("Creating pickup database schema...")
    setup_db(pickup)
    print("Done.")


def drop_database():
    from pickup.domain import pickup
    from pickup.utils.db import drop_db

    print("Initializing pickup domain...")
    pickup.init()
    print("Dropping pickup database schema...")
    drop_db(pickup)
    print("Done.")


def run_sweep(name):
    from pickup.domain import pickup
    from pickup.services import build_services
    from pickup.utils.logging import log_context

    pickup.init()
    services = build_services()
    with log_context(job=name), pickup.domain_context():
        if name == "thank-completed":
            result = services.completion.sweep()
        else:
            result = services.reminders.sweep()
    print(json.dumps(result, ensure_ascii=False))


def main():
    parser = argparse.ArgumentParser(description="Pickup service management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")

    sweep_parser = subparsers.add_parser("sweep", help="Run a scheduled sweep once")
    sweep_parser.add_argument("name", choices=SWEEPS)

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    elif args.command == "sweep":
        run_sweep(args.name)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
