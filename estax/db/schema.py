"""SQLite database schema definition and reference data seeding."""

import sqlite3
from pathlib import Path

from estax.db import reference_data
from estax.engines.brackets import validate_brackets
from estax.models.reference import TaxBracket

SCHEMA_VERSION = 1

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS schema_version (
    version INTEGER PRIMARY KEY,
    applied_at TEXT NOT NULL DEFAULT (datetime('now'))
);

CREATE TABLE IF NOT EXISTS tax_year_config (
    tax_year INTEGER PRIMARY KEY,
    ss_wage_max TEXT NOT NULL,
    ss_tax_rate TEXT NOT NULL,
    medicare_tax_rate TEXT NOT NULL,
    se_tax_deductible_percentage TEXT NOT NULL,
    se_deduction_factor TEXT NOT NULL,
    required_payment_threshold TEXT NOT NULL,
    min_se_threshold TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS filing_status (
    id INTEGER PRIMARY KEY,
    status_code TEXT NOT NULL UNIQUE,
    status_name TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS standard_deductions (
    tax_year INTEGER NOT NULL REFERENCES tax_year_config(tax_year),
    filing_status_id INTEGER NOT NULL REFERENCES filing_status(id),
    amount TEXT NOT NULL,
    PRIMARY KEY (tax_year, filing_status_id)
);

CREATE TABLE IF NOT EXISTS tax_brackets (
    tax_year INTEGER NOT NULL REFERENCES tax_year_config(tax_year),
    filing_status_id INTEGER NOT NULL REFERENCES filing_status(id),
    min_income TEXT NOT NULL,
    max_income TEXT,
    tax_rate TEXT NOT NULL,
    base_tax TEXT NOT NULL,
    PRIMARY KEY (tax_year, filing_status_id, min_income)
);

CREATE TABLE IF NOT EXISTS estimated_tax_calculation (
    id TEXT PRIMARY KEY,
    tax_year INTEGER NOT NULL,
    filing_status TEXT NOT NULL,
    input_json TEXT NOT NULL,
    calculated_se_tax TEXT NOT NULL,
    calculated_total_tax TEXT NOT NULL,
    calculated_required_payment TEXT NOT NULL,
    result_json TEXT NOT NULL,
    created_at TEXT NOT NULL DEFAULT (datetime('now')),
    updated_at TEXT
);
"""


def create_schema(db_path: Path) -> sqlite3.Connection:
    """Create the database schema. Returns the connection.

    The connection may be handed to a worker thread for async loading.
    """
    conn = sqlite3.connect(str(db_path), check_same_thread=False)
    conn.execute("PRAGMA journal_mode=WAL")
    conn.execute("PRAGMA foreign_keys=ON")
    conn.executescript(SCHEMA_SQL)
    conn.execute(
        "INSERT OR IGNORE INTO schema_version (version) VALUES (?)",
        (SCHEMA_VERSION,),
    )
    conn.commit()
    return conn


def seed_reference_data(conn: sqlite3.Connection) -> None:
    """Insert the bundled reference tables. Existing rows are left untouched.

    Every rate schedule is checked before anything is written; a malformed
    schedule raises BracketGapError.
    """
    for year, by_status in reference_data.TAX_BRACKETS.items():
        for code, schedule in by_status.items():
            validate_brackets([
                TaxBracket(
                    tax_year=year,
                    filing_status=code,
                    min_income=lo,
                    max_income=hi,
                    tax_rate=rate,
                    base_tax=base,
                )
                for lo, hi, rate, base in schedule
            ])

    conn.executemany(
        "INSERT OR IGNORE INTO filing_status (id, status_code, status_name) VALUES (?, ?, ?)",
        [(fs_id, code.value, name) for fs_id, code, name in reference_data.FILING_STATUSES],
    )
    status_ids = {code: fs_id for fs_id, code, _ in reference_data.FILING_STATUSES}

    for year, cfg in reference_data.TAX_YEAR_CONFIG.items():
        conn.execute(
            """INSERT OR IGNORE INTO tax_year_config
               (tax_year, ss_wage_max, ss_tax_rate, medicare_tax_rate,
                se_tax_deductible_percentage, se_deduction_factor,
                required_payment_threshold, min_se_threshold)
               VALUES (?, ?, ?, ?, ?, ?, ?, ?)""",
            (
                year,
                str(cfg["ss_wage_max"]),
                str(cfg["ss_tax_rate"]),
                str(cfg["medicare_tax_rate"]),
                str(cfg["se_tax_deductible_percentage"]),
                str(cfg["se_deduction_factor"]),
                str(cfg["required_payment_threshold"]),
                str(cfg["min_se_threshold"]),
            ),
        )

    for year, by_status in reference_data.STANDARD_DEDUCTION.items():
        conn.executemany(
            """INSERT OR IGNORE INTO standard_deductions
               (tax_year, filing_status_id, amount) VALUES (?, ?, ?)""",
            [(year, status_ids[code], str(amount)) for code, amount in by_status.items()],
        )

    for year, by_status in reference_data.TAX_BRACKETS.items():
        for code, schedule in by_status.items():
            conn.executemany(
                """INSERT OR IGNORE INTO tax_brackets
                   (tax_year, filing_status_id, min_income, max_income, tax_rate, base_tax)
                   VALUES (?, ?, ?, ?, ?, ?)""",
                [
                    (
                        year,
                        status_ids[code],
                        str(lo),
                        str(hi) if hi is not None else None,
                        str(rate),
                        str(base),
                    )
                    for lo, hi, rate, base in schedule
                ],
            )
    conn.commit()
