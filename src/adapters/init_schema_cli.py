"""CLI adapter creating the ledger tables in the configured database."""

from src.infrastructure.container import build_finance_repository


def main() -> None:
    """Create missing ledger tables."""
    repository = build_finance_repository()
    repository.ensure_schema()
    print("Ledger schema is ready.")


if __name__ == "__main__":  # pragma: no cover
    main()
