"""Form 1040-ES worksheet report generator."""

from decimal import Decimal
from pathlib import Path

from jinja2 import Environment, FileSystemLoader

from estax.models.estimate import TaxEstimateInput, TaxEstimateResult

TEMPLATE_DIR = Path(__file__).parent / "templates"


def money(value: Decimal | None) -> str:
    return f"${(value or Decimal('0')):>12,.2f}"


class WorksheetReportGenerator:
    """Renders the estimated tax and SE worksheets as plain text."""

    def __init__(self) -> None:
        self.env = Environment(
            loader=FileSystemLoader(str(TEMPLATE_DIR)),
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.env.filters["money"] = money

    def render(self, estimate_input: TaxEstimateInput, result: TaxEstimateResult) -> str:
        template = self.env.get_template("worksheet.txt")
        return template.render(inp=estimate_input, res=result, se=result.se_worksheet)
