# main.py

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from answer_search.application.search_service import AnswerSearchService
from answer_search.domain.models import Record
from answer_search.infrastructure.record_store import InMemoryRecordStore
from answer_search.interface.cli import (
    display_welcome_banner,
    display_loading_status,
    prompt_for_query,
    prompt_for_filter,
    display_results,
    display_error,
    ask_continue,
)


DEFAULT_RECORDS_PATH = "data/records.json"
DEFAULT_TOP_K = 5


def main(argv: Optional[List[str]] = None) -> None:
    args = sys.argv[1:] if argv is None else argv
    records_path, top_k = _parse_args(args)

    display_welcome_banner()

    # ── 1. Load the record set ───────────────────────────────────────────────
    store = InMemoryRecordStore()
    try:
        store.replace(load_records(records_path))
    except (FileNotFoundError, ValueError) as error:
        # json.JSONDecodeError is a ValueError
        display_error(str(error))
        sys.exit(1)

    display_loading_status(store.count(), store.get_kind_stats())

    search_service = AnswerSearchService()

    # ── 2. Interactive search loop ────────────────────────────────────────────
    while True:
        query = prompt_for_query()
        accuracy_filter = prompt_for_filter()
        results = search_service.search_all(store, query, accuracy_filter)
        display_results(query, results, limit=top_k)

        if not ask_continue():
            break


def load_records(path: str) -> List[Record]:
    """
    Read records from a JSON file holding a list of
    {"type", "question", "options", "answer"} objects.
    """
    file_path = Path(path)
    if not file_path.exists():
        raise FileNotFoundError(f"Record file not found: {path}")

    with open(file_path, "r", encoding="utf-8") as f:
        payload = json.load(f)

    if not isinstance(payload, list):
        raise ValueError(f"Expected a JSON list of records in '{path}'.")

    if not all(isinstance(item, dict) for item in payload):
        raise ValueError(f"Every record in '{path}' must be a JSON object.")

    records = [Record.from_dict(item) for item in payload]
    print(f"[Main] Read {len(records)} records from '{file_path.name}'.")
    return records


def _parse_args(args: List[str]):
    parser = argparse.ArgumentParser(description="Look up imported questions from noisy text.")
    parser.add_argument("records", nargs="?", default=DEFAULT_RECORDS_PATH,
                        help="JSON file holding the record list")
    parser.add_argument("--top", type=int, default=DEFAULT_TOP_K,
                        help="maximum number of results to display")
    parsed = parser.parse_args(args)
    return parsed.records, parsed.top


if __name__ == "__main__":
    main()
