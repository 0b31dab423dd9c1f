"""Batch import of taxpayer estimate inputs."""

from estax.ingestion.csv_estimates import load_estimates, load_estimates_from_str

__all__ = ["load_estimates", "load_estimates_from_str"]
