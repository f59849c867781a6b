"""CSV loader — reads and normalizes officer and customer data files."""

from __future__ import annotations

import csv
import logging
from pathlib import Path

from caseflow.adapters.csv_loader.normalizer import (
    clean_string,
    normalize_column_name,
    normalize_product_type,
    parse_bool,
)

logger = logging.getLogger(__name__)


def _sniff_dialect(sample: str) -> type[csv.Dialect] | csv.Dialect:
    """Detect the delimiter (comma/semicolon/tab) to support spreadsheet exports."""
    if not sample:
        return csv.get_dialect("excel")

    first_line = sample.splitlines()[0]
    delims = [";", ",", "\t"]
    counts = {d: first_line.count(d) for d in delims}
    best_delim = max(counts, key=counts.get)

    if counts[best_delim] > 0:
        class DynamicDialect(csv.excel):
            delimiter = best_delim
        return DynamicDialect

    return csv.get_dialect("excel")


def _read_csv(file_path: Path, encoding: str = "utf-8-sig") -> list[dict[str, str | None]]:
    """Read a CSV file with BOM handling and column normalization.

    Args:
        file_path: path to the CSV file.
        encoding: file encoding (utf-8-sig strips BOM automatically).

    Returns:
        List of dicts with normalized column names.
    """
    with open(file_path, encoding=encoding, newline="") as f:
        sample = f.read(4096)
        f.seek(0)
        dialect = _sniff_dialect(sample)
        reader = csv.DictReader(f, dialect=dialect)
        if reader.fieldnames is None:
            raise ValueError(f"CSV file {file_path} has no header row")

        col_map = {col: normalize_column_name(col) for col in reader.fieldnames}
        rows = []
        for raw_row in reader:
            row = {col_map[k]: clean_string(v) for k, v in raw_row.items() if k is not None}
            rows.append(row)

    logger.info("Loaded %d rows from %s (columns: %s)", len(rows), file_path.name, list(col_map.values()))
    return rows


def load_officers(file_path: Path) -> list[dict]:
    """Load and normalize the officers CSV.

    Expected columns (after normalization):
        username, specialization (or loan_type), max_caseload (or max_customers),
        priority_weight (or assignment_priority), external_load (or current_load),
        is_active
    Missing capacity values are left as None for the caller to default.
    """
    rows = _read_csv(file_path)
    officers = []
    for row in rows:
        username = clean_string(row.get("username") or row.get("name"))
        specialization = normalize_product_type(
            row.get("specialization") or row.get("loan_type") or row.get("loantype")
        )
        if not username or not specialization:
            logger.warning("Skipping officer row without username/specialization: %s", row)
            continue

        officers.append({
            "username": username,
            "specialization": specialization,
            "max_caseload": _parse_int(row.get("max_caseload") or row.get("max_customers")),
            "priority_weight": _parse_float(
                row.get("priority_weight") or row.get("assignment_priority")
            ),
            "external_load": _parse_int(row.get("external_load") or row.get("current_load")) or 0,
            "is_active": parse_bool(row.get("is_active") or row.get("active")),
        })
    logger.info("Parsed %d officers", len(officers))
    return officers


def load_customers(file_path: Path) -> list[dict]:
    """Load and normalize the customers CSV.

    Expected columns (after normalization):
        account_number (or customer_id), name, product_type (or loan_type),
        outstanding_balance (or loan_balance), overdue_amount (or arrears), is_active
    """
    rows = _read_csv(file_path)
    customers = []
    for row in rows:
        account_number = clean_string(
            row.get("account_number") or row.get("customer_id") or row.get("id")
        )
        product_type = normalize_product_type(
            row.get("product_type") or row.get("loan_type") or row.get("loantype")
        )
        if not account_number or not product_type:
            logger.warning("Skipping customer row without account/product type: %s", row)
            continue

        customers.append({
            "account_number": account_number,
            "name": clean_string(row.get("name")) or account_number,
            "product_type": product_type,
            "outstanding_balance": _parse_float(
                row.get("outstanding_balance") or row.get("loan_balance")
            ) or 0.0,
            "overdue_amount": _parse_float(row.get("overdue_amount") or row.get("arrears")) or 0.0,
            "is_active": parse_bool(row.get("is_active") or row.get("active")),
        })
    logger.info("Parsed %d customers", len(customers))
    return customers


def _parse_float(value: str | None) -> float | None:
    """Safely parse a float, accepting comma decimals and thousands spaces."""
    if not value:
        return None
    try:
        return float(value.replace("\u00a0", "").replace(" ", "").replace(",", ".").strip())
    except (ValueError, AttributeError):
        return None


def _parse_int(value: str | None) -> int | None:
    parsed = _parse_float(value)
    return int(parsed) if parsed is not None else None
