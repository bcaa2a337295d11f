"""
Seed script for the report store (JSON file or Firestore).

Usage:
  - Dry run (default): python scripts/seed_db.py
  - Apply to configured store: python scripts/seed_db.py --apply
  - Different seed file: python scripts/seed_db.py --seed ./demo_reports.json --apply

Behavior:
  - Loads a JSON array of report records (default `db_seed.json` in the cwd).
  - Records without an id get a fresh one; records without a priority get
    one from the type table.
  - Appends each report through `get_report_store()`, which honours
    REPORT_STORE / REPORTS_FILE from `.env`.
"""

import argparse
import json
import os
from typing import List

from pydantic import ValidationError

from app.models.report import Report, report_from_record
from app.services.priority_classifier import get_report_classifier
from app.services.report_store import ReportStore, get_report_store


def load_seed(path: str) -> List[dict]:
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, list):
        raise ValueError(f"Seed file {path} must contain a JSON array of reports")
    return data


def build_reports(records: List[dict], store: ReportStore) -> List[Report]:
    classifier = get_report_classifier()
    reports = []
    for record in records:
        record = dict(record)
        if "id" not in record:
            record["id"] = store.next_id()
        if not record.get("priority"):
            record["priority"] = classifier.classify(record.get("type")).value
        reports.append(report_from_record(record))
    return reports


def write_to_store(store: ReportStore, reports: List[Report], apply: bool = False):
    for report in reports:
        print(f"Preparing: report {report.id} ({report.type}, {report.priority}) at {report.location}")
        if not apply:
            continue
        store.append(report)
        print(f"Wrote: report {report.id}")


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("--apply", action="store_true", help="Write seed to the store instead of dry-run")
    parser.add_argument("--seed", default=os.path.join(os.getcwd(), "db_seed.json"), help="Seed file path")
    args = parser.parse_args()

    if not os.path.exists(args.seed):
        print(f"Seed file not found: {args.seed}")
        return

    store = get_report_store()
    try:
        reports = build_reports(load_seed(args.seed), store)
    except (ValueError, ValidationError) as e:
        print(f"Invalid seed file: {e}")
        return

    write_to_store(store, reports, apply=args.apply)

    if args.apply:
        print(f"Seeding completed ({store.backend} store).")
    else:
        print("Dry run complete. Re-run with --apply to write to the store.")


if __name__ == "__main__":
    main()
