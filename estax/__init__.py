"""estax: Form 1040-ES estimated tax calculator."""

__version__ = "0.1.0"
