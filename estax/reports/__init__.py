"""Report generators."""

from estax.reports.worksheet import WorksheetReportGenerator

__all__ = ["WorksheetReportGenerator"]
