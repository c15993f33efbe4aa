"""CLI adapter running the recurring obligations worker.

By default a single materialization pass runs and its summary is printed.
With ``--loop`` the pass repeats on the configured interval until
interrupted.
"""

import argparse

from src.infrastructure.container import (
    build_materialize_use_case,
    build_recurring_task,
)
from src.infrastructure.logging.logger import get_app_logger


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Materialize due recurring rules into ledger entries."
    )
    parser.add_argument(
        "--loop",
        action="store_true",
        help="Keep running on the configured interval.",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """Run one recurring pass, or the periodic worker with --loop."""
    args = _build_parser().parse_args(argv)
    logger = get_app_logger()
    use_case = build_materialize_use_case()

    if not args.loop:
        result = use_case.run()
        print(
            f"Materialized {len(result.created)} recurring entries "
            f"(skipped={len(result.skipped)}, failed={len(result.failed)})."
        )
        return

    task = build_recurring_task(use_case)
    try:
        task.run_forever()
    except KeyboardInterrupt:
        logger.info("Recurring worker interrupted")
    finally:
        task.stop()


if __name__ == "__main__":  # pragma: no cover
    main()
