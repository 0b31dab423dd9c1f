"""Bundled federal reference data for Form 1040-ES.

Rate constants, standard deductions and tax rate schedules keyed by tax year
and filing status. Used to seed the reference repositories; the engine never
reads these tables directly.

Sources:
  - 2024: IRS Rev. Proc. 2023-34, SSA 2024 contribution and benefit base
  - 2025: IRS Rev. Proc. 2024-40, SSA 2025 contribution and benefit base
"""

from decimal import Decimal

from estax.models.enums import FilingStatusCode

FILING_STATUSES: list[tuple[int, FilingStatusCode, str]] = [
    (1, FilingStatusCode.SINGLE, "Single"),
    (2, FilingStatusCode.MFJ, "Married Filing Jointly"),
    (3, FilingStatusCode.MFS, "Married Filing Separately"),
    (4, FilingStatusCode.HOH, "Head of Household"),
    (5, FilingStatusCode.QSS, "Qualifying Surviving Spouse"),
]

# ---------------------------------------------------------------------------
# Year rate constants
# ---------------------------------------------------------------------------
TAX_YEAR_CONFIG: dict[int, dict[str, Decimal]] = {
    2024: {
        "ss_wage_max": Decimal("168600.00"),
        "ss_tax_rate": Decimal("0.124"),
        "medicare_tax_rate": Decimal("0.029"),
        "se_tax_deductible_percentage": Decimal("0.9235"),
        "se_deduction_factor": Decimal("0.50"),
        "required_payment_threshold": Decimal("1000.00"),
        "min_se_threshold": Decimal("400.00"),
    },
    2025: {
        "ss_wage_max": Decimal("176100.00"),
        "ss_tax_rate": Decimal("0.124"),
        "medicare_tax_rate": Decimal("0.029"),
        "se_tax_deductible_percentage": Decimal("0.9235"),
        "se_deduction_factor": Decimal("0.50"),
        "required_payment_threshold": Decimal("1000.00"),
        "min_se_threshold": Decimal("400.00"),
    },
}

# ---------------------------------------------------------------------------
# Standard deduction
# ---------------------------------------------------------------------------
STANDARD_DEDUCTION: dict[int, dict[FilingStatusCode, Decimal]] = {
    2024: {
        FilingStatusCode.SINGLE: Decimal("14600.00"),
        FilingStatusCode.MFJ: Decimal("29200.00"),
        FilingStatusCode.MFS: Decimal("14600.00"),
        FilingStatusCode.HOH: Decimal("21900.00"),
        FilingStatusCode.QSS: Decimal("29200.00"),
    },
    2025: {
        FilingStatusCode.SINGLE: Decimal("15000.00"),
        FilingStatusCode.MFJ: Decimal("30000.00"),
        FilingStatusCode.MFS: Decimal("15000.00"),
        FilingStatusCode.HOH: Decimal("22500.00"),
        FilingStatusCode.QSS: Decimal("30000.00"),
    },
}

# ---------------------------------------------------------------------------
# Tax rate schedules: {year: {status: [(min_income, max_income, rate, base_tax)]}}
# max_income of None is the unbounded top bracket.
# ---------------------------------------------------------------------------
_Schedule = list[tuple[Decimal, Decimal | None, Decimal, Decimal]]


def _schedule(rows: list[tuple[str, str | None, str, str]]) -> _Schedule:
    return [
        (Decimal(lo), Decimal(hi) if hi is not None else None, Decimal(rate), Decimal(base))
        for lo, hi, rate, base in rows
    ]


_2024_SINGLE = _schedule([
    ("0", "11600", "0.10", "0"),
    ("11600", "47150", "0.12", "1160.00"),
    ("47150", "100525", "0.22", "5426.00"),
    ("100525", "191950", "0.24", "17168.50"),
    ("191950", "243725", "0.32", "39110.50"),
    ("243725", "609350", "0.35", "55678.50"),
    ("609350", None, "0.37", "183647.25"),
])
_2024_MFJ = _schedule([
    ("0", "23200", "0.10", "0"),
    ("23200", "94300", "0.12", "2320.00"),
    ("94300", "201050", "0.22", "10852.00"),
    ("201050", "383900", "0.24", "34337.00"),
    ("383900", "487450", "0.32", "78221.00"),
    ("487450", "731200", "0.35", "111357.00"),
    ("731200", None, "0.37", "196669.50"),
])
_2024_MFS = _schedule([
    ("0", "11600", "0.10", "0"),
    ("11600", "47150", "0.12", "1160.00"),
    ("47150", "100525", "0.22", "5426.00"),
    ("100525", "191950", "0.24", "17168.50"),
    ("191950", "243725", "0.32", "39110.50"),
    ("243725", "365600", "0.35", "55678.50"),
    ("365600", None, "0.37", "98334.75"),
])
_2024_HOH = _schedule([
    ("0", "16550", "0.10", "0"),
    ("16550", "63100", "0.12", "1655.00"),
    ("63100", "100500", "0.22", "7241.00"),
    ("100500", "191950", "0.24", "15469.00"),
    ("191950", "243700", "0.32", "37417.00"),
    ("243700", "609350", "0.35", "53977.00"),
    ("609350", None, "0.37", "181954.50"),
])

_2025_SINGLE = _schedule([
    ("0", "11925", "0.10", "0"),
    ("11925", "48475", "0.12", "1192.50"),
    ("48475", "103350", "0.22", "5578.50"),
    ("103350", "197300", "0.24", "17651.00"),
    ("197300", "250525", "0.32", "40199.00"),
    ("250525", "626350", "0.35", "57231.00"),
    ("626350", None, "0.37", "188769.75"),
])
_2025_MFJ = _schedule([
    ("0", "23850", "0.10", "0"),
    ("23850", "96950", "0.12", "2385.00"),
    ("96950", "206700", "0.22", "11157.00"),
    ("206700", "394600", "0.24", "35302.00"),
    ("394600", "501050", "0.32", "80398.00"),
    ("501050", "751600", "0.35", "114462.00"),
    ("751600", None, "0.37", "202154.50"),
])
_2025_MFS = _schedule([
    ("0", "11925", "0.10", "0"),
    ("11925", "48475", "0.12", "1192.50"),
    ("48475", "103350", "0.22", "5578.50"),
    ("103350", "197300", "0.24", "17651.00"),
    ("197300", "250525", "0.32", "40199.00"),
    ("250525", "375800", "0.35", "57231.00"),
    ("375800", None, "0.37", "101077.25"),
])
_2025_HOH = _schedule([
    ("0", "17000", "0.10", "0"),
    ("17000", "64850", "0.12", "1700.00"),
    ("64850", "103350", "0.22", "7442.00"),
    ("103350", "197300", "0.24", "15912.00"),
    ("197300", "250500", "0.32", "38460.00"),
    ("250500", "626350", "0.35", "55484.00"),
    ("626350", None, "0.37", "187031.50"),
])

TAX_BRACKETS: dict[int, dict[FilingStatusCode, _Schedule]] = {
    2024: {
        FilingStatusCode.SINGLE: _2024_SINGLE,
        FilingStatusCode.MFJ: _2024_MFJ,
        FilingStatusCode.MFS: _2024_MFS,
        FilingStatusCode.HOH: _2024_HOH,
        FilingStatusCode.QSS: _2024_MFJ,
    },
    2025: {
        FilingStatusCode.SINGLE: _2025_SINGLE,
        FilingStatusCode.MFJ: _2025_MFJ,
        FilingStatusCode.MFS: _2025_MFS,
        FilingStatusCode.HOH: _2025_HOH,
        FilingStatusCode.QSS: _2025_MFJ,
    },
}
