# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Card draw service: rotating meeting duties for a small group."""

__version__ = "1.0.0"
