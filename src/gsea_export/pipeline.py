"""Export pipeline producing the Reactome MSigDB-GSEA gene set file."""

import logging
import time
from pathlib import Path
from typing import Optional, Union

from .config import ExportConfig
from .data import compose
from .graph import (
    fetch_pathway_reaction_pairs,
    fetch_reaction_gene_pairs,
    fetch_release_number,
    open_session,
)
from .report import MINIMUM_GENE_SET_SIZE, build_rows, get_output_file_name, write_report


class GeneSetExportPipeline:
    """Main class for exporting Reactome pathways as GSEA gene sets."""

    def __init__(self, config: Union[ExportConfig, str, Path]):
        """Initialise the pipeline.

        Args:
            config: ExportConfig instance or path to the TOML configuration file
        """
        if not isinstance(config, ExportConfig):
            config = ExportConfig(config)
        self.config = config
        self.minimum_gene_set_size = MINIMUM_GENE_SET_SIZE
        self.logger = logging.getLogger(__name__)

    def run(self) -> Path:
        """Run the export against the configured graph database.

        Returns:
            Path of the written report
        """
        self.logger.info("Starting Reactome gene set export")
        start_time = time.time()

        with open_session(self.config) as session:
            output_file = self.export(session)

        elapsed_time = time.time() - start_time
        self.logger.info(f"Export completed in {elapsed_time:.2f} seconds")
        return output_file

    def export(self, session, output_dir: Optional[Union[str, Path]] = None) -> Path:
        """Export gene sets using an open graph database session.

        Args:
            session: Open neo4j session
            output_dir: Optional output directory. If not provided, uses the
                        directory from the configuration.

        Returns:
            Path of the written report
        """
        if output_dir is None:
            output_dir = self.config.get_output_path()

        release_number = fetch_release_number(session)
        self.logger.info(f"Exporting gene sets for Reactome release {release_number}")

        self.logger.info("Step 1: Querying pathway reactions and reaction genes")
        pathway_genes = compose(
            fetch_pathway_reaction_pairs(session),
            fetch_reaction_gene_pairs(session)
        )

        self.logger.info(f"Step 2: Building gene sets of at least {self.minimum_gene_set_size} genes")
        rows = build_rows(pathway_genes, self.minimum_gene_set_size)
        self.logger.info(
            f"Retained {len(rows)} of {len(pathway_genes)} pathways "
            f"({len(pathway_genes) - len(rows)} below minimum gene set size)"
        )

        self.logger.info("Step 3: Writing report")
        output_file = Path(output_dir) / get_output_file_name(release_number)
        if output_file.exists():
            self.logger.warning(f"{output_file} already exists, new lines will be appended")
        return write_report(rows, output_file)
