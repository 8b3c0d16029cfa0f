"""SelfAccounting report rendering engine (PDF, XLSX and CSV output)."""

__version__ = "1.4.0"
