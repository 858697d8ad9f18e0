"""Read-only traversal queries against the Reactome graph database."""

import logging
from contextlib import contextmanager
from typing import Iterator, Tuple

from neo4j import GraphDatabase
from neo4j.exceptions import DriverError, Neo4jError

from .config import ExportConfig
from .exceptions import DataAccessError

logger = logging.getLogger(__name__)

SPECIES = "Homo sapiens"
NCBI_GENE_DATABASE = "NCBI Gene"

RELEASE_NUMBER_QUERY = """
MATCH (dbInfo:DBInfo)
RETURN dbInfo.releaseNumber AS releaseNumber
"""

PATHWAY_REACTION_QUERY = """
MATCH (p:Pathway)-[:hasEvent*]->(rle:ReactionLikeEvent)
WHERE p.speciesName = $species
RETURN p.stId AS stId, p.displayName AS displayName, rle.dbId AS rdbId
"""

REACTION_GENE_QUERY = """
MATCH (rds:ReferenceDNASequence)<-[:referenceGene]-
      (rgp:ReferenceGeneProduct)<-[:referenceEntity|referenceSequence|hasModifiedResidue]-
      (ewas:EntityWithAccessionedSequence)<-[:hasComponent|hasMember|hasCandidate|repeatedUnit|input|output|catalystActivity|physicalEntity*]-
      (rle:ReactionLikeEvent)
WHERE rle.speciesName = $species AND rds.databaseName = $database_name
RETURN DISTINCT rle.dbId AS rdbId, rds.identifier AS ncbiGeneId
"""


@contextmanager
def open_session(config: ExportConfig):
    """Open a session on the graph database described by ``config``.

    The driver and session are closed when the block exits, whether or not
    an error was raised inside it.

    Args:
        config: Export configuration holding the connection settings

    Yields:
        A neo4j session
    """
    logger.info(f"Connecting to graph database at {config.uri}")
    try:
        driver = GraphDatabase.driver(config.uri, auth=config.auth)
    except (DriverError, Neo4jError, ValueError) as e:
        raise DataAccessError(f"Unable to create graph database driver for {config.uri}: {e}") from e

    try:
        with driver.session() as session:
            yield session
    finally:
        driver.close()


def _run(session, query: str, **parameters) -> Iterator:
    try:
        for record in session.run(query, **parameters):
            yield record
    except (DriverError, Neo4jError) as e:
        raise DataAccessError(f"Graph database query failed: {e}") from e


def fetch_release_number(session) -> int:
    """Read the Reactome release number from the DBInfo node.

    Args:
        session: Open neo4j session

    Returns:
        Release number as an integer
    """
    for record in _run(session, RELEASE_NUMBER_QUERY):
        release_number = record["releaseNumber"]
        if release_number is None:
            break
        return int(release_number)
    raise DataAccessError("No release number found on the DBInfo node")


def fetch_pathway_reaction_pairs(session, species: str = SPECIES) -> Iterator[Tuple[str, str, int]]:
    """Yield every (pathway stable id, pathway name, reaction db id) triple.

    Reactions are reached through one or more ``hasEvent`` edges, so reactions
    of nested sub-pathways belong to every enclosing pathway as well.

    Args:
        session: Open neo4j session
        species: Species name the pathways are restricted to

    Yields:
        Tuples of (stable_id, display_name, reaction_id)
    """
    for record in _run(session, PATHWAY_REACTION_QUERY, species=species):
        yield record["stId"], record["displayName"], int(record["rdbId"])


def fetch_reaction_gene_pairs(session, species: str = SPECIES) -> Iterator[Tuple[int, str]]:
    """Yield every distinct (reaction db id, NCBI Gene id) pair.

    Args:
        session: Open neo4j session
        species: Species name the reactions are restricted to

    Yields:
        Tuples of (reaction_id, ncbi_gene_id)
    """
    for record in _run(session, REACTION_GENE_QUERY, species=species, database_name=NCBI_GENE_DATABASE):
        yield int(record["rdbId"]), str(record["ncbiGeneId"])
