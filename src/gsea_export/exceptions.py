"""Exceptions raised by the gene set export."""


class ExportError(Exception):
    """Base class for errors that abort an export run."""


class ConfigurationError(ExportError, ValueError):
    """Configuration file missing, unreadable or holding a malformed value."""


class DataAccessError(ExportError):
    """Connection or query failure against the Reactome graph database."""


class ReportWriteError(ExportError, OSError):
    """Failure creating the output directory or writing a report line."""
