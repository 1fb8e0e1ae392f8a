"""
Command-line interface for the ledger.

Mirrors the HTTP API: ``category``, ``transaction`` and ``summary``
commands, each with ``--json`` for machine-readable output. Failures are
written to stderr and the process exits with status 1.
"""

import argparse
import json
import logging
import sys
from typing import Callable, List, Optional

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from ledger.config import Settings, configure_logging, settings as default_settings
from ledger.database import (
    Base,
    SessionFactory,
    build_engine,
    build_session_factory,
    ensure_sqlite_directory,
)
from ledger.exceptions import LedgerError, LedgerValidationError
from ledger.normalize import to_utc_date
from ledger.schemas.category import CategoryCreate, CategoryUpdate
from ledger.schemas.dashboard import SummaryReport
from ledger.schemas.transaction import TransactionCreate, TransactionFilter, TransactionUpdate
from ledger.services.category_service import CategoryService
from ledger.services.transaction_service import TransactionService
from ledger.validators import (
    messages_from_errors,
    validate_category_create,
    validate_category_update,
    validate_report_range,
    validate_transaction_create,
    validate_transaction_filter,
    validate_transaction_update,
)

logger = logging.getLogger(__name__)

ENTRY_TYPES = ("expense", "income")
NULL = "null"


class Context:
    """Everything a command needs, built once by ``main``."""

    def __init__(self, session_factory: SessionFactory, config: Settings, out=None, err=None):
        self.session_factory = session_factory
        self.config = config
        self.categories = CategoryService(session_factory)
        self.transactions = TransactionService(session_factory)
        self.out = out or sys.stdout
        self.err = err or sys.stderr

    def echo(self, text: str) -> None:
        print(text, file=self.out)

    def dump(self, payload) -> None:
        self.echo(json.dumps(payload, indent=2))


def _model_json(model) -> dict:
    return model.model_dump(mode="json", by_alias=True)


def _nullable(value: Optional[str]) -> Optional[str]:
    return None if value == NULL else value


def _not_found(ctx: Context, kind: str, item_id: str, user_id: str, as_json: bool) -> int:
    if as_json:
        ctx.dump({"id": item_id, "error": "not found"})
    print(f"{kind} ID {item_id} not found or not owned by user {user_id}.", file=ctx.err)
    return 1


# --- Category commands ---

def category_add(ctx: Context, args) -> int:
    data = CategoryCreate(user_id=args.user_id, name=args.name, type=args.type)
    validate_category_create(data).raise_if_invalid()
    category = ctx.categories.create(data)
    if args.json:
        ctx.dump(_model_json(category))
    else:
        ctx.echo(f"Category '{category.name}' ({category.type.value}) created with ID: {category.id}")
    return 0


def category_list(ctx: Context, args) -> int:
    categories = ctx.categories.list(args.user_id, type=args.type)
    if args.json:
        ctx.dump([_model_json(c) for c in categories])
    else:
        for c in categories:
            ctx.echo(f"ID: {c.id}, Name: {c.name}, Type: {c.type.value}")
    return 0


def category_update(ctx: Context, args) -> int:
    fields = {}
    if args.name is not None:
        fields["name"] = args.name
    if args.type is not None:
        fields["type"] = args.type
    changes = CategoryUpdate(**fields)
    validate_category_update(changes).raise_if_invalid()

    category = ctx.categories.update(args.id, args.user_id, changes)
    if not category:
        return _not_found(ctx, "Category", args.id, args.user_id, args.json)
    if args.json:
        ctx.dump(_model_json(category))
    else:
        ctx.echo(f"Category ID {category.id} updated: Name: {category.name}, Type: {category.type.value}")
    return 0


def category_delete(ctx: Context, args) -> int:
    deleted = ctx.categories.delete(args.id, args.user_id)
    if not deleted:
        return _not_found(ctx, "Category", args.id, args.user_id, args.json)
    if args.json:
        ctx.dump({"id": args.id, "deleted": True})
    else:
        ctx.echo(f"Category ID {args.id} deleted successfully.")
    return 0


# --- Transaction commands ---

def _transaction_line(t) -> str:
    return (
        f"ID: {t.id}, Amount: {t.amount}, Type: {t.type.value}, "
        f"Date: {t.date.isoformat()}, Desc: {t.description or 'N/A'}"
    )


def transaction_add(ctx: Context, args) -> int:
    data = TransactionCreate(
        user_id=args.user_id,
        amount=args.amount,
        type=args.type,
        date=args.date,
        category_id=args.category_id,
        description=args.description,
    )
    validate_transaction_create(data).raise_if_invalid()
    transaction = ctx.transactions.create(data)
    if args.json:
        ctx.dump(_model_json(transaction))
    else:
        ctx.echo(f"Transaction ID: {transaction.id}, Amount: {transaction.amount}, Type: {transaction.type.value}")
    return 0


def transaction_list(ctx: Context, args) -> int:
    filters = TransactionFilter(
        user_id=args.user_id,
        start_date=args.start_date,
        end_date=args.end_date,
        category_id=args.category_id,
        type=args.type,
        limit=args.limit,
        offset=args.offset,
    )
    validate_transaction_filter(filters, ctx.config).raise_if_invalid()
    transactions = ctx.transactions.list(filters)
    if args.json:
        ctx.dump([_model_json(t) for t in transactions])
    else:
        for t in transactions:
            ctx.echo(_transaction_line(t))
    return 0


def transaction_update(ctx: Context, args) -> int:
    fields = {}
    if args.amount is not None:
        fields["amount"] = args.amount
    if args.type is not None:
        fields["type"] = args.type
    if args.date is not None:
        fields["date"] = args.date
    if args.category_id is not None:
        fields["category_id"] = _nullable(args.category_id)
    if args.description is not None:
        fields["description"] = _nullable(args.description)
    changes = TransactionUpdate(**fields)
    validate_transaction_update(changes).raise_if_invalid()

    transaction = ctx.transactions.update(args.id, args.user_id, changes)
    if not transaction:
        return _not_found(ctx, "Transaction", args.id, args.user_id, args.json)
    if args.json:
        ctx.dump(_model_json(transaction))
    else:
        ctx.echo(f"Transaction ID {transaction.id} updated.")
    return 0


def transaction_delete(ctx: Context, args) -> int:
    deleted = ctx.transactions.delete(args.id, args.user_id)
    if not deleted:
        return _not_found(ctx, "Transaction", args.id, args.user_id, args.json)
    if args.json:
        ctx.dump({"id": args.id, "deleted": True})
    else:
        ctx.echo(f"Transaction ID {args.id} deleted successfully.")
    return 0


# --- Reports ---

def summary(ctx: Context, args) -> int:
    start, end = to_utc_date(args.start_date), to_utc_date(args.end_date)
    validate_report_range(args.user_id, start, end, ctx.config).raise_if_invalid()
    report = SummaryReport(
        summary=ctx.transactions.get_summary(args.user_id, start, end),
        spending_by_category=ctx.transactions.get_spending_by_category(args.user_id, start, end),
    )
    if args.json:
        ctx.dump(_model_json(report))
        return 0

    totals = report.summary
    ctx.echo(f"Financial Summary for User {args.user_id} ({start} to {end}):")
    ctx.echo(f"  Total Income: {totals.total_income:.2f}")
    ctx.echo(f"  Total Expense: {totals.total_expense:.2f}")
    ctx.echo(f"  Balance: {totals.balance:.2f}")
    ctx.echo("\nSpending by Category:")
    if report.spending_by_category:
        for row in report.spending_by_category:
            ctx.echo(f"  - {row.category_name} ({row.category_type.value}): {row.total_amount:.2f}")
    else:
        ctx.echo("  No spending found for this period.")
    return 0


def init_db(ctx: Context, args) -> int:
    db = ctx.session_factory()
    try:
        engine = db.get_bind()
        ensure_sqlite_directory(str(engine.url))
        Base.metadata.create_all(bind=engine)
    finally:
        db.close()
    ctx.echo("Database schema created.")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ledger",
        description="Manage personal finance transactions and categories",
    )
    parser.add_argument("--version", action="version", version="%(prog)s 1.0.0")
    commands = parser.add_subparsers(dest="command", required=True)

    def with_json(p: argparse.ArgumentParser) -> argparse.ArgumentParser:
        p.add_argument("-j", "--json", action="store_true", help="Output in JSON format")
        return p

    # category
    category = commands.add_parser("category", help="Manage categories")
    category_commands = category.add_subparsers(dest="action", required=True)

    p = with_json(category_commands.add_parser("add", help="Add a new category"))
    p.add_argument("user_id")
    p.add_argument("name")
    p.add_argument("type", choices=ENTRY_TYPES)
    p.set_defaults(handler=category_add)

    p = with_json(category_commands.add_parser("list", help="List all categories for a user"))
    p.add_argument("user_id")
    p.add_argument("-t", "--type", choices=ENTRY_TYPES)
    p.set_defaults(handler=category_list)

    p = with_json(category_commands.add_parser("update", help="Update a category by ID"))
    p.add_argument("id")
    p.add_argument("user_id")
    p.add_argument("-n", "--name")
    p.add_argument("-t", "--type", choices=ENTRY_TYPES)
    p.set_defaults(handler=category_update)

    p = with_json(category_commands.add_parser("delete", help="Delete a category by ID"))
    p.add_argument("id")
    p.add_argument("user_id")
    p.set_defaults(handler=category_delete)

    # transaction
    transaction = commands.add_parser("transaction", help="Manage transactions")
    transaction_commands = transaction.add_subparsers(dest="action", required=True)

    p = with_json(transaction_commands.add_parser("add", help="Add a new transaction"))
    p.add_argument("user_id")
    p.add_argument("amount")
    p.add_argument("type", choices=ENTRY_TYPES)
    p.add_argument("date", help="YYYY-MM-DD")
    p.add_argument("-c", "--category-id")
    p.add_argument("-d", "--description")
    p.set_defaults(handler=transaction_add)

    p = with_json(transaction_commands.add_parser("list", help="List transactions for a user"))
    p.add_argument("user_id")
    p.add_argument("-s", "--start-date")
    p.add_argument("-e", "--end-date")
    p.add_argument("-c", "--category-id")
    p.add_argument("-t", "--type", choices=ENTRY_TYPES)
    p.add_argument("-l", "--limit", type=int)
    p.add_argument("-o", "--offset", type=int)
    p.set_defaults(handler=transaction_list)

    p = with_json(transaction_commands.add_parser("update", help="Update a transaction by ID"))
    p.add_argument("id")
    p.add_argument("user_id")
    p.add_argument("-a", "--amount")
    p.add_argument("-t", "--type", choices=ENTRY_TYPES)
    p.add_argument("-d", "--date")
    p.add_argument("-c", "--category-id", help="New category ID ('null' to unset)")
    p.add_argument("-D", "--description", help="New description ('null' to unset)")
    p.set_defaults(handler=transaction_update)

    p = with_json(transaction_commands.add_parser("delete", help="Delete a transaction by ID"))
    p.add_argument("id")
    p.add_argument("user_id")
    p.set_defaults(handler=transaction_delete)

    # summary
    p = with_json(commands.add_parser("summary", help="Financial summary for a date range"))
    p.add_argument("user_id")
    p.add_argument("start_date")
    p.add_argument("end_date")
    p.set_defaults(handler=summary)

    p = commands.add_parser("init-db", help="Create the database tables")
    p.set_defaults(handler=init_db, json=False)

    return parser


def main(argv: Optional[List[str]] = None,
         session_factory: Optional[SessionFactory] = None,
         config: Optional[Settings] = None,
         out=None, err=None) -> int:
    config = config or default_settings
    configure_logging(config.log_level)
    if session_factory is None:
        session_factory = build_session_factory(build_engine(config.database_url))

    args = build_parser().parse_args(argv)
    ctx = Context(session_factory, config, out=out, err=err)
    handler: Callable[[Context, argparse.Namespace], int] = args.handler

    try:
        return handler(ctx, args)
    except ValidationError as e:
        print(f"Error: {LedgerValidationError(messages_from_errors(e.errors()))}", file=ctx.err)
        return 1
    except (LedgerError, ValueError) as e:
        print(f"Error: {e}", file=ctx.err)
        return 1
    except SQLAlchemyError as e:
        logger.error(f"Storage error running {args.command}: {e}")
        print(f"Error: {e}", file=ctx.err)
        return 1


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
