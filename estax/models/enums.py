"""Enumerations for the estimated tax engine."""

from enum import StrEnum


class FilingStatusCode(StrEnum):
    SINGLE = "S"
    MFJ = "MFJ"
    MFS = "MFS"
    HOH = "HOH"
    QSS = "QSS"
