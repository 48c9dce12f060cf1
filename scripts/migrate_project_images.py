#!/usr/bin/env python3
"""
Rewrite legacy project image values into {url, id} records.

Run:
    PYTHONPATH=src PROJECTS_TABLE_NAME=portfolio-projects \
      python scripts/migrate_project_images.py --dry-run
"""

import argparse
import sys

from aws_lambda_powertools import Logger

from core.images.migration import ProjectImageMigration

logger = Logger(service="migrate-project-images")


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Normalize thumbnail and image values on every project"
    )

    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Log the changes without writing them",
    )

    return parser.parse_args()


def main() -> int:
    args = parse_args()

    try:
        stats = ProjectImageMigration().run(dry_run=args.dry_run)
    except Exception:
        logger.exception("Image migration aborted")
        return 1

    logger.info("Migration summary", extra=stats)
    return 1 if stats["failed"] else 0


if __name__ == "__main__":
    sys.exit(main())
