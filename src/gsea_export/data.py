"""
Aggregation of the graph query results into pathway gene sets.

Both pair streams are folded into frames keyed by pathway or reaction, with
identifiers deduplicated and sorted once while the frame is built. The frames
are never modified afterwards; composing them produces a new frame.
"""

import logging
from typing import Iterable, Tuple

import polars as pl

logger = logging.getLogger(__name__)

PATHWAY_REACTION_SCHEMA = {
    'stable_id': pl.Utf8,
    'display_name': pl.Utf8,
    'reaction_id': pl.Int64,
}

REACTION_GENE_SCHEMA = {
    'reaction_id': pl.Int64,
    'ncbi_gene_id': pl.Utf8,
}

PATHWAY_REACTIONS_SCHEMA = {
    'stable_id': pl.Utf8,
    'display_name': pl.Utf8,
    'reaction_ids': pl.List(pl.Int64),
}

REACTION_GENES_SCHEMA = {
    'reaction_id': pl.Int64,
    'ncbi_gene_ids': pl.List(pl.Utf8),
}

PATHWAY_GENES_SCHEMA = {
    'stable_id': pl.Utf8,
    'display_name': pl.Utf8,
    'ncbi_gene_ids': pl.List(pl.Utf8),
}

PATHWAY_KEY = ['stable_id', 'display_name']


def _pairs_to_frame(pairs: Iterable[Tuple], schema: dict) -> pl.DataFrame:
    rows = list(pairs)
    if not rows:
        return pl.DataFrame(schema=schema)
    return pl.DataFrame(rows, schema=schema, orient='row')


def build_pathway_reactions(pairs: Iterable[Tuple[str, str, int]]) -> pl.DataFrame:
    """
    Group reaction ids by pathway.

    Args:
        pairs: (stable_id, display_name, reaction_id) tuples

    Returns:
        DataFrame with stable_id, display_name and a sorted, duplicate-free
        reaction_ids list, one row per pathway ordered by stable_id
    """
    df = _pairs_to_frame(pairs, PATHWAY_REACTION_SCHEMA)
    if df.is_empty():
        return pl.DataFrame(schema=PATHWAY_REACTIONS_SCHEMA)

    return (
        df.group_by(PATHWAY_KEY)
        .agg(pl.col('reaction_id').unique().sort().alias('reaction_ids'))
        .sort('stable_id')
    )


def build_reaction_genes(pairs: Iterable[Tuple[int, str]]) -> pl.DataFrame:
    """
    Group NCBI Gene ids by reaction.

    Args:
        pairs: (reaction_id, ncbi_gene_id) tuples

    Returns:
        DataFrame with reaction_id and a sorted, duplicate-free ncbi_gene_ids
        list, one row per reaction
    """
    df = _pairs_to_frame(pairs, REACTION_GENE_SCHEMA)
    if df.is_empty():
        return pl.DataFrame(schema=REACTION_GENES_SCHEMA)

    return (
        df.group_by('reaction_id')
        .agg(pl.col('ncbi_gene_id').unique().sort().alias('ncbi_gene_ids'))
        .sort('reaction_id')
    )


def compose_pathway_genes(pathway_reactions: pl.DataFrame, reaction_genes: pl.DataFrame) -> pl.DataFrame:
    """
    Union the gene sets of every reaction of each pathway.

    A reaction missing from ``reaction_genes`` contributes no genes, exactly
    like a reaction mapped to an empty list. Pathways whose reactions have no
    genes at all are kept with an empty list.

    Args:
        pathway_reactions: Output of build_pathway_reactions
        reaction_genes: Output of build_reaction_genes

    Returns:
        DataFrame with stable_id, display_name and sorted ncbi_gene_ids,
        one row per pathway of ``pathway_reactions`` ordered by stable_id
    """
    if pathway_reactions.is_empty():
        return pl.DataFrame(schema=PATHWAY_GENES_SCHEMA)

    return (
        pathway_reactions
        .explode('reaction_ids')
        .rename({'reaction_ids': 'reaction_id'})
        .join(reaction_genes, on='reaction_id', how='left')
        .explode('ncbi_gene_ids')
        .group_by(PATHWAY_KEY)
        .agg(pl.col('ncbi_gene_ids').drop_nulls().unique().sort())
        .sort('stable_id')
    )


def compose(
    pathway_reaction_pairs: Iterable[Tuple[str, str, int]],
    reaction_gene_pairs: Iterable[Tuple[int, str]]
) -> pl.DataFrame:
    """
    Build the pathway to NCBI Gene id map from the two query results.

    Args:
        pathway_reaction_pairs: (stable_id, display_name, reaction_id) tuples
        reaction_gene_pairs: (reaction_id, ncbi_gene_id) tuples

    Returns:
        DataFrame with stable_id, display_name and ncbi_gene_ids columns
    """
    pathway_reactions = build_pathway_reactions(pathway_reaction_pairs)
    logger.info(f"Mapped {len(pathway_reactions)} pathways to reactions")

    reaction_genes = build_reaction_genes(reaction_gene_pairs)
    logger.info(f"Mapped {len(reaction_genes)} reactions to NCBI Gene identifiers")

    pathway_genes = compose_pathway_genes(pathway_reactions, reaction_genes)
    logger.debug(f"Composed gene sets for {len(pathway_genes)} pathways")
    return pathway_genes
