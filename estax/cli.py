"""Typer CLI interface for estax."""

import logging
from decimal import Decimal, InvalidOperation
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from estax import __version__
from estax.exceptions import EngineError

DEFAULT_DB = Path.home() / ".estax" / "estax.db"

app = typer.Typer(
    name="estax",
    help="estax: Form 1040-ES estimated tax calculator.",
)
console = Console()


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    version: bool = typer.Option(False, "--version", help="Show the version and exit"),
) -> None:
    """estax: Form 1040-ES estimated tax calculator."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
    if version:
        typer.echo(f"estax {__version__}")
        raise typer.Exit()
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


def _db_option() -> Path:
    return typer.Option(
        DEFAULT_DB,
        "--db",
        envvar="ESTAX_DB",
        help="Path to the SQLite database file",
    )


def _parse_money(name: str, value: str | None) -> Decimal | None:
    if value is None:
        return None
    try:
        return Decimal(value.replace(",", "").replace("$", ""))
    except InvalidOperation:
        raise typer.BadParameter(f"'{value}' is not a valid amount", param_hint=name)


def _open_db(db: Path):
    from estax.db.schema import create_schema

    if not db.exists():
        typer.echo("Error: No database found. Create one first with `estax init-db`.", err=True)
        raise typer.Exit(1)
    return create_schema(db)


def _fail(exc: EngineError) -> None:
    typer.echo(f"Error: {exc}", err=True)
    raise typer.Exit(1)


@app.command(name="init-db")
def init_db(db: Path = _db_option()) -> None:
    """Create the database and seed the bundled reference data."""
    from estax.db.schema import create_schema, seed_reference_data

    db.parent.mkdir(parents=True, exist_ok=True)
    conn = create_schema(db)
    seed_reference_data(conn)
    conn.close()
    typer.echo(f"Reference data seeded into {db}")


@app.command()
def years(db: Path = _db_option()) -> None:
    """List tax years with seeded reference data."""
    from estax.db.repository import SQLiteReferenceRepository

    conn = _open_db(db)
    try:
        seeded = SQLiteReferenceRepository(conn).list_tax_years()
    except EngineError as exc:
        _fail(exc)
    finally:
        conn.close()
    for year in seeded:
        typer.echo(str(year))


@app.command()
def brackets(
    year: int = typer.Argument(..., help="Tax year"),
    filing_status: str = typer.Option(
        "S", "--filing-status", "-s", help="Filing status: S, MFJ, MFS, HOH, QSS"
    ),
    db: Path = _db_option(),
) -> None:
    """Print the tax rate schedule for a year and filing status."""
    from estax.db.repository import SQLiteReferenceRepository

    fs = _parse_filing_status(filing_status)
    conn = _open_db(db)
    try:
        schedule = SQLiteReferenceRepository(conn).get_tax_brackets(year, fs)
    except EngineError as exc:
        _fail(exc)
    finally:
        conn.close()

    table = Table(title=f"{year} tax rate schedule ({fs.value})")
    table.add_column("Over", justify="right")
    table.add_column("But not over", justify="right")
    table.add_column("Base tax", justify="right")
    table.add_column("Rate", justify="right")
    for b in schedule:
        upper = f"${b.max_income:,.2f}" if b.max_income is not None else "-"
        table.add_row(
            f"${b.min_income:,.2f}", upper, f"${b.base_tax:,.2f}", f"{b.tax_rate:.0%}"
        )
    console.print(table)


def _parse_filing_status(value: str):
    from estax.models.enums import FilingStatusCode

    aliases = {"SINGLE": "S", "MARRIED_FILING_JOINTLY": "MFJ",
               "MARRIED_FILING_SEPARATELY": "MFS", "HEAD_OF_HOUSEHOLD": "HOH"}
    key = value.upper()
    try:
        return FilingStatusCode(aliases.get(key, key))
    except ValueError:
        valid = ", ".join(code.value for code in FilingStatusCode)
        typer.echo(f"Error: Invalid filing status '{value}'. Valid: {valid}", err=True)
        raise typer.Exit(1)


@app.command()
def estimate(
    year: int = typer.Argument(..., help="Tax year to estimate"),
    filing_status: str = typer.Option(
        "S", "--filing-status", "-s", help="Filing status: S, MFJ, MFS, HOH, QSS"
    ),
    agi: str = typer.Option("0", "--agi", help="Expected adjusted gross income"),
    deduction: str | None = typer.Option(
        None, "--deduction", help="Expected deduction (default: standard deduction)"
    ),
    qbi: str | None = typer.Option(None, "--qbi", help="Expected QBI deduction"),
    amt: str | None = typer.Option(None, "--amt", help="Expected alternative minimum tax"),
    credits: str | None = typer.Option(None, "--credits", help="Expected credits"),
    other_taxes: str | None = typer.Option(None, "--other-taxes", help="Expected other taxes"),
    refundable_credits: str | None = typer.Option(
        None, "--refundable-credits", help="Expected refundable credits"
    ),
    withholding: str | None = typer.Option(
        None, "--withholding", help="Expected income tax withholding"
    ),
    prior_year_tax: str | None = typer.Option(
        None, "--prior-year-tax", help="Prior year's tax (recorded, not used)"
    ),
    se_income: str | None = typer.Option(None, "--se-income", help="Net self-employment income"),
    crp: str | None = typer.Option(None, "--crp", help="Conservation Reserve Program payments"),
    wages: str | None = typer.Option(
        None, "--wages", help="Wages subject to social security tax"
    ),
    bundled: bool = typer.Option(
        False, "--bundled", help="Use bundled reference data instead of the database"
    ),
    save: bool = typer.Option(False, "--save", help="Save the estimate to the database"),
    db: Path = _db_option(),
) -> None:
    """Compute the 1040-ES estimated tax and required payment."""
    from estax.db.estimates import EstimateRepository, new_estimate_id
    from estax.db.memory import InMemoryReferenceRepository
    from estax.db.repository import SQLiteReferenceRepository
    from estax.engines.estimator import EstimateOrchestrator
    from estax.models.estimate import TaxEstimateInput
    from estax.reports.worksheet import WorksheetReportGenerator

    if bundled and save:
        typer.echo("Error: --save needs the database; drop --bundled.", err=True)
        raise typer.Exit(1)

    estimate_input = TaxEstimateInput(
        tax_year=year,
        filing_status=_parse_filing_status(filing_status),
        expected_agi=_parse_money("--agi", agi),
        expected_deduction=_parse_money("--deduction", deduction),
        expected_qbi_deduction=_parse_money("--qbi", qbi),
        expected_amt=_parse_money("--amt", amt),
        expected_credits=_parse_money("--credits", credits),
        expected_other_taxes=_parse_money("--other-taxes", other_taxes),
        expected_refundable_credits=_parse_money("--refundable-credits", refundable_credits),
        expected_withholding=_parse_money("--withholding", withholding),
        prior_year_tax=_parse_money("--prior-year-tax", prior_year_tax),
        se_income=_parse_money("--se-income", se_income),
        expected_crp_payments=_parse_money("--crp", crp),
        expected_wages=_parse_money("--wages", wages),
    )

    conn = None
    if bundled:
        repo = InMemoryReferenceRepository.from_bundled()
    else:
        conn = _open_db(db)
        repo = SQLiteReferenceRepository(conn)

    try:
        result = EstimateOrchestrator(repo).compute_estimate(estimate_input)
        estimate_id = None
        if save:
            estimate_id = EstimateRepository(conn).save(
                new_estimate_id(), estimate_input, result
            )
    except EngineError as exc:
        _fail(exc)
    finally:
        if conn is not None:
            conn.close()

    typer.echo(WorksheetReportGenerator().render(estimate_input, result))
    if estimate_id is not None:
        typer.echo(f"Saved estimate {estimate_id}")


@app.command()
def history(
    year: int | None = typer.Option(None, "--year", help="Only show this tax year"),
    db: Path = _db_option(),
) -> None:
    """List saved estimates."""
    from estax.db.estimates import EstimateRepository

    conn = _open_db(db)
    try:
        rows = EstimateRepository(conn).list_estimates(tax_year=year)
    except EngineError as exc:
        _fail(exc)
    finally:
        conn.close()
    if not rows:
        typer.echo("No saved estimates.")
        return

    table = Table(title="Saved estimates")
    table.add_column("ID")
    table.add_column("Year")
    table.add_column("Status")
    table.add_column("SE tax", justify="right")
    table.add_column("Total tax", justify="right")
    table.add_column("Required", justify="right")
    for row in rows:
        table.add_row(
            row["id"],
            str(row["tax_year"]),
            row["filing_status"],
            f"${Decimal(row['calculated_se_tax']):,.2f}",
            f"${Decimal(row['calculated_total_tax']):,.2f}",
            f"${Decimal(row['calculated_required_payment']):,.2f}",
        )
    console.print(table)


@app.command()
def show(
    estimate_id: str = typer.Argument(..., help="Saved estimate ID"),
    db: Path = _db_option(),
) -> None:
    """Print the worksheet for a saved estimate."""
    from estax.db.estimates import EstimateRepository
    from estax.reports.worksheet import WorksheetReportGenerator

    conn = _open_db(db)
    try:
        estimate_input, result = EstimateRepository(conn).get(estimate_id)
    except EngineError as exc:
        _fail(exc)
    finally:
        conn.close()
    typer.echo(WorksheetReportGenerator().render(estimate_input, result))


@app.command()
def delete(
    estimate_id: str = typer.Argument(..., help="Saved estimate ID"),
    db: Path = _db_option(),
) -> None:
    """Delete a saved estimate."""
    from estax.db.estimates import EstimateRepository

    conn = _open_db(db)
    try:
        EstimateRepository(conn).delete(estimate_id)
    except EngineError as exc:
        _fail(exc)
    finally:
        conn.close()
    typer.echo(f"Deleted estimate {estimate_id}")


@app.command()
def update(
    estimate_id: str = typer.Argument(..., help="Saved estimate ID"),
    filing_status: str | None = typer.Option(
        None, "--filing-status", "-s", help="Filing status: S, MFJ, MFS, HOH, QSS"
    ),
    agi: str | None = typer.Option(None, "--agi", help="Expected adjusted gross income"),
    deduction: str | None = typer.Option(None, "--deduction", help="Expected deduction"),
    qbi: str | None = typer.Option(None, "--qbi", help="Expected QBI deduction"),
    amt: str | None = typer.Option(None, "--amt", help="Expected alternative minimum tax"),
    credits: str | None = typer.Option(None, "--credits", help="Expected credits"),
    other_taxes: str | None = typer.Option(None, "--other-taxes", help="Expected other taxes"),
    refundable_credits: str | None = typer.Option(
        None, "--refundable-credits", help="Expected refundable credits"
    ),
    withholding: str | None = typer.Option(
        None, "--withholding", help="Expected income tax withholding"
    ),
    prior_year_tax: str | None = typer.Option(
        None, "--prior-year-tax", help="Prior year's tax (recorded, not used)"
    ),
    se_income: str | None = typer.Option(None, "--se-income", help="Net self-employment income"),
    crp: str | None = typer.Option(None, "--crp", help="Conservation Reserve Program payments"),
    wages: str | None = typer.Option(
        None, "--wages", help="Wages subject to social security tax"
    ),
    db: Path = _db_option(),
) -> None:
    """Change a saved estimate's inputs and recompute it.

    Options left out keep their saved values. With no options the estimate is
    recomputed against the current reference data.
    """
    from estax.db.estimates import EstimateRepository
    from estax.db.repository import SQLiteReferenceRepository
    from estax.engines.estimator import EstimateOrchestrator
    from estax.reports.worksheet import WorksheetReportGenerator

    raw = {
        "expected_agi": ("--agi", agi),
        "expected_deduction": ("--deduction", deduction),
        "expected_qbi_deduction": ("--qbi", qbi),
        "expected_amt": ("--amt", amt),
        "expected_credits": ("--credits", credits),
        "expected_other_taxes": ("--other-taxes", other_taxes),
        "expected_refundable_credits": ("--refundable-credits", refundable_credits),
        "expected_withholding": ("--withholding", withholding),
        "prior_year_tax": ("--prior-year-tax", prior_year_tax),
        "se_income": ("--se-income", se_income),
        "expected_crp_payments": ("--crp", crp),
        "expected_wages": ("--wages", wages),
    }
    changes = {
        field: _parse_money(name, value)
        for field, (name, value) in raw.items()
        if value is not None
    }
    if filing_status is not None:
        changes["filing_status"] = _parse_filing_status(filing_status)

    conn = _open_db(db)
    try:
        store = EstimateRepository(conn)
        saved_input, _ = store.get(estimate_id)
        estimate_input = saved_input.model_copy(update=changes)
        result = EstimateOrchestrator(SQLiteReferenceRepository(conn)).compute_estimate(
            estimate_input
        )
        store.update(estimate_id, estimate_input, result)
    except EngineError as exc:
        _fail(exc)
    finally:
        conn.close()

    typer.echo(WorksheetReportGenerator().render(estimate_input, result))
    typer.echo(f"Updated estimate {estimate_id}")


@app.command(name="import")
def import_cmd(
    file: Path = typer.Argument(..., help="CSV file of estimate inputs"),
    bundled: bool = typer.Option(
        False, "--bundled", help="Use bundled reference data instead of the database"
    ),
    save: bool = typer.Option(False, "--save", help="Save every estimate to the database"),
    db: Path = _db_option(),
) -> None:
    """Compute estimates for every row of a CSV file.

    All rows are computed before anything is saved; one bad row aborts the
    import.
    """
    from estax.db.estimates import EstimateRepository, new_estimate_id
    from estax.db.memory import InMemoryReferenceRepository
    from estax.db.repository import SQLiteReferenceRepository
    from estax.engines.estimator import EstimateOrchestrator
    from estax.ingestion.csv_estimates import load_estimates

    if bundled and save:
        typer.echo("Error: --save needs the database; drop --bundled.", err=True)
        raise typer.Exit(1)

    try:
        inputs = load_estimates(file)
    except EngineError as exc:
        _fail(exc)
    if not inputs:
        typer.echo(f"No estimates found in {file}")
        return

    conn = None
    if bundled:
        repo = InMemoryReferenceRepository.from_bundled()
    else:
        conn = _open_db(db)
        repo = SQLiteReferenceRepository(conn)

    saved_ids: list[str] = []
    try:
        orchestrator = EstimateOrchestrator(repo)
        results = []
        for row_number, estimate_input in enumerate(inputs, start=1):
            try:
                results.append(orchestrator.compute_estimate(estimate_input))
            except EngineError as exc:
                typer.echo(f"Error: row {row_number}: {exc}", err=True)
                raise typer.Exit(1)
        if save:
            store = EstimateRepository(conn)
            for estimate_input, result in zip(inputs, results):
                saved_ids.append(store.save(new_estimate_id(), estimate_input, result))
    except EngineError as exc:
        _fail(exc)
    finally:
        if conn is not None:
            conn.close()

    table = Table(title=f"Imported estimates ({file.name})")
    table.add_column("Row", justify="right")
    table.add_column("Year")
    table.add_column("Status")
    table.add_column("SE tax", justify="right")
    table.add_column("Total tax", justify="right")
    table.add_column("Required", justify="right")
    for row_number, result in enumerate(results, start=1):
        table.add_row(
            str(row_number),
            str(result.tax_year),
            result.filing_status.value,
            f"${result.calculated_se_tax:,.2f}",
            f"${result.calculated_total_tax:,.2f}",
            f"${result.calculated_required_payment:,.2f}",
        )
    console.print(table)
    for estimate_id in saved_ids:
        typer.echo(f"Saved estimate {estimate_id}")
