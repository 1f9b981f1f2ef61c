#!/usr/bin/env python3
"""
Invoice Reconciliation - Command Line

Runs one reconciliation pass over a saved document-analysis payload and
prints the updated draft with any notices as JSON.

Usage:
    python reconcile_cli.py --extracted analysis.json \
        --projects projects.json --beneficiaries beneficiaries.json
    python reconcile_cli.py --extracted analysis.json --draft draft.json --db ./bank_accounts.db
"""

import argparse
import json
import sys
from pathlib import Path

from src.core.logging import setup_logging
from src.models.directory import Beneficiary, ProjectCandidate
from src.models.draft import DraftFinancialRecord
from src.models.invoice import ExtractedInvoiceData
from src.services.reconciliation import create_orchestrator
from src.services.storage import (
    BankAccountStorageError,
    InMemoryBankAccountStore,
    SQLiteBankAccountStore,
    get_bank_account_store,
)


def load_json(path: str | None, default):
    if not path:
        return default
    return json.loads(Path(path).read_text(encoding="utf-8"))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Reconcile extracted invoice data into a draft")
    parser.add_argument("--extracted", required=True, help="Document-analysis JSON payload")
    parser.add_argument("--draft", help="Current draft JSON (default: empty draft)")
    parser.add_argument("--projects", help="JSON list of project candidates")
    parser.add_argument("--beneficiaries", help="JSON list of known beneficiaries")
    store_group = parser.add_mutually_exclusive_group()
    store_group.add_argument("--db", help="SQLite bank account database (default: BANK_ACCOUNTS_DB_PATH)")
    store_group.add_argument("--dry-run", action="store_true", help="Use an empty in-memory bank account store")
    parser.add_argument("--log-level", default=None, help="Log level (default: LOG_LEVEL)")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(level=args.log_level)

    try:
        extracted = ExtractedInvoiceData.from_payload(load_json(args.extracted, {}))
        draft = DraftFinancialRecord.model_validate(load_json(args.draft, {}))
        projects = [ProjectCandidate.model_validate(p) for p in load_json(args.projects, [])]
        beneficiaries = [Beneficiary.model_validate(b) for b in load_json(args.beneficiaries, [])]
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    try:
        if args.dry_run:
            store = InMemoryBankAccountStore()
        elif args.db:
            store = SQLiteBankAccountStore(args.db)
        else:
            store = get_bank_account_store()
    except BankAccountStorageError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    result = create_orchestrator(store).apply(extracted, draft, beneficiaries, projects)
    print(result.model_dump_json(indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
