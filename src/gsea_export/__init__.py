"""
Reactome Gene Set Export
========================

Export Reactome pathways as an MSigDB-GSEA gene set file.
"""

from .pipeline import GeneSetExportPipeline
from .config import ExportConfig, generate_default_config
from .data import (
    build_pathway_reactions,
    build_reaction_genes,
    compose_pathway_genes,
    compose,
)
from .graph import (
    open_session,
    fetch_release_number,
    fetch_pathway_reaction_pairs,
    fetch_reaction_gene_pairs,
)
from .report import build_rows, write_report
from .exceptions import ExportError, ConfigurationError, DataAccessError, ReportWriteError
from .utils import setup_logging, ensure_dir

__version__ = "0.1.0"

__all__ = [
    "GeneSetExportPipeline",
    "ExportConfig",
    "generate_default_config",
    "build_pathway_reactions",
    "build_reaction_genes",
    "compose_pathway_genes",
    "compose",
    "open_session",
    "fetch_release_number",
    "fetch_pathway_reaction_pairs",
    "fetch_reaction_gene_pairs",
    "build_rows",
    "write_report",
    "ExportError",
    "ConfigurationError",
    "DataAccessError",
    "ReportWriteError",
    "setup_logging",
    "ensure_dir",
]
