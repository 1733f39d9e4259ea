"""Command-line runner for the foreign-key update scenarios.

Runs each selected variant against its own fresh store and logs one line per
outcome. Exit status is 0 when no variant lost a row and every variant that
leaves the association alone ends with the requested foreign key.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Sequence

from dotenv import load_dotenv
from sqlalchemy.exc import IntegrityError

from fkharness.config import load_config
from fkharness.logging_setup import configure_logging
from fkharness.logic.harness import run_scenario
from fkharness.logic.partial_update import UpdateVariant

logger = logging.getLogger(__name__)


def _create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fkharness",
        description="Run foreign-key partial update scenarios against an in-memory store.",
    )
    parser.add_argument(
        "--variant",
        dest="variants",
        action="append",
        choices=[v.value for v in UpdateVariant],
        help="Variant to run; repeat for several. Defaults to all.",
    )
    parser.add_argument(
        "--foreign-key",
        type=int,
        default=None,
        help="New foreign-key value for the parent (default from configuration).",
    )
    parser.add_argument(
        "--lazy",
        action="store_true",
        help="Load the parent without its child association.",
    )
    parser.add_argument(
        "--env-file",
        type=str,
        default=None,
        help="Path to an additional environment file.",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = _create_parser()
    args = parser.parse_args(argv)
    if args.env_file:
        if not load_dotenv(args.env_file, override=False):
            parser.error(f"{args.env_file} file not found or empty.")

    cfg = load_config()
    configure_logging(echo_sql=cfg.database.echo_sql)
    fk_new = args.foreign_key if args.foreign_key is not None else cfg.scenario.default_foreign_key
    if fk_new <= 0:
        parser.error("--foreign-key must be a positive integer")
    eager = cfg.scenario.eager_load and not args.lazy
    variants = [UpdateVariant(v) for v in args.variants] if args.variants else list(UpdateVariant)

    failures = 0
    for variant in variants:
        try:
            outcome = run_scenario(variant, fk_new, eager=eager)
        except IntegrityError as exc:
            # Association-null variants are rejected at flush and rolled back
            ok = variant.nulls_association
            logger.info("variant=%s result=rejected error=%s expected=%s", variant.value, exc.orig, ok)
            failures += 0 if ok else 1
            continue
        ok = outcome.rows_preserved and (variant.nulls_association or outcome.after.foreign_key == fk_new)
        logger.info(
            "variant=%s result=%s parents=%s children=%s foreign_key=%s child_id=%s",
            variant.value,
            "ok" if ok else "FAILED",
            outcome.after.parent_count,
            outcome.after.child_count,
            outcome.after.foreign_key,
            outcome.after.child_id,
        )
        failures += 0 if ok else 1

    return 0 if failures == 0 else 1


if __name__ == "__main__":
    sys.exit(main())
