"""Formatting and writing of the MSigDB-GSEA gene set report."""

import logging
import os
from pathlib import Path
from typing import Iterable, Union

import polars as pl
from tqdm.auto import tqdm

from .exceptions import ReportWriteError

logger = logging.getLogger(__name__)

MINIMUM_GENE_SET_SIZE = 10

REACTOME_DETAIL_URL = "https://reactome.org/content/detail/"

HEADER = ("Gene_Set_Name", "Brief_Description", "External_Link", "NCBI Gene IDs")

# ASCII whitespace only; non-breaking and other Unicode spaces stay in the name
ASCII_WHITESPACE_RUN = r"[ \t\n\x0B\f\r]+"

ROW_COLUMNS =['gene_set_name', 'brief_description', 'external_link', 'ncbi_gene_ids']


def build_rows(pathway_genes: pl.DataFrame, minimum_gene_set_size: int = MINIMUM_GENE_SET_SIZE) -> pl.DataFrame:
    """
    Turn the pathway gene sets into report rows.

    Pathways with fewer than ``minimum_gene_set_size`` genes are dropped and
    the rest are ordered by stable identifier using string comparison.

    Args:
        pathway_genes: DataFrame with stable_id, display_name and ncbi_gene_ids
        minimum_gene_set_size: Smallest gene set that is reported

    Returns:
        DataFrame with gene_set_name, brief_description, external_link and
        ncbi_gene_ids string columns, one row per reported pathway
    """
    return (
        pathway_genes
        .filter(pl.col('ncbi_gene_ids').list.len() >= minimum_gene_set_size)
        .sort('stable_id')
        .select(
            pl.concat_str([pl.lit("REACTOME "), pl.col('display_name')])
            .str.replace_all(ASCII_WHITESPACE_RUN, "_")
            .str.to_uppercase()
            .alias('gene_set_name'),
            pl.concat_str([pl.lit("Genes involved in "), pl.col('display_name')])
            .alias('brief_description'),
            pl.concat_str([pl.lit(REACTOME_DETAIL_URL), pl.col('stable_id')])
            .alias('external_link'),
            pl.concat_str([
                pl.lit('"'),
                pl.col('ncbi_gene_ids').list.sort().list.join(", "),
                pl.lit('"'),
            ]).alias('ncbi_gene_ids'),
        )
    )


def format_line(fields: Iterable[str]) -> str:
    """Join fields with tabs and terminate with the platform line separator."""
    return "\t".join(fields) + os.linesep


def get_output_file_name(release_number: int) -> str:
    """Get the report file name for a Reactome release."""
    return f"Reactome_GeneSet_{release_number}.txt"


def write_report(rows: pl.DataFrame, output_path: Union[str, Path]) -> Path:
    """
    Write the header and one line per row to ``output_path``.

    The file is opened in append mode, so an existing file from an earlier
    run is extended rather than replaced.

    Args:
        rows: Output of build_rows
        output_path: Destination file

    Returns:
        Path of the written file
    """
    output_path = Path(output_path)
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        f = open(output_path, 'a', encoding='utf-8', newline='')
    except OSError as e:
        raise ReportWriteError(f"Unable to open report file {output_path}: {e}") from e

    with f:
        try:
            f.write(format_line(HEADER))
        except OSError as e:
            raise ReportWriteError(f"Unable to write report header to {output_path}: {e}") from e

        for row in tqdm(rows.iter_rows(named=True), total=len(rows), desc="Writing gene sets",
                        unit="gene set", leave=False):
            try:
                f.write(format_line(row[column] for column in ROW_COLUMNS))
            except OSError as e:
                raise ReportWriteError(
                    f"Unable to write report line for {row['gene_set_name']} ({row['external_link']}): {e}"
                ) from e

    logger.info(f"Wrote {len(rows)} gene sets to {output_path}")
    return output_path
