"""
Test cases for the gene set export pipeline.
"""

import os
import pytest
from contextlib import contextmanager
from pathlib import Path
from unittest.mock import patch

from neo4j.exceptions import ServiceUnavailable

from gsea_export.config import ExportConfig, generate_default_config
from gsea_export.exceptions import DataAccessError
from gsea_export.pipeline import GeneSetExportPipeline

def gene_ids(start, count):
    return [str(gene) for gene in range(start, start + count)]

class FakeSession:
    """Session stand-in answering the export queries from fixed pairs."""

    def __init__(self, release_number, pathway_pairs, gene_pairs):
        self.release_number = release_number
        self.pathway_pairs = pathway_pairs
        self.gene_pairs = gene_pairs
        self.queries = []

    def run(self, query, **parameters):
        self.queries.append(query)
        if 'DBInfo' in query:
            return iter([{'releaseNumber': self.release_number}])
        if 'hasEvent' in query:
            return iter([
                {'stId': stable_id, 'displayName': name, 'rdbId': reaction_id}
                for stable_id, name, reaction_id in self.pathway_pairs
            ])
        if 'referenceGene' in query:
            return iter([
                {'rdbId': reaction_id, 'ncbiGeneId': gene_id}
                for reaction_id, gene_id in self.gene_pairs
            ])
        raise AssertionError(f"Unexpected query: {query}")

@pytest.fixture
def config(tmp_path):
    """Create a default configuration writing into the temporary directory."""
    config = ExportConfig(generate_default_config(tmp_path / 'config.toml'))
    config.config['output']['directory'] = str(tmp_path / 'results')
    return config

@pytest.fixture
def session():
    """Two qualifying pathways and one with only three genes."""
    pathway_pairs = [
        ('R-HSA-5', 'Cell  Cycle', 1),
        ('R-HSA-5', 'Cell  Cycle', 2),
        ('R-HSA-10', 'Immune System', 3),
        ('R-HSA-10', 'Immune System', 4),
        ('R-HSA-2', 'Transport', 5),
    ]
    gene_pairs = (
        [(1, gene) for gene in gene_ids(1, 6)]
        + [(2, gene) for gene in gene_ids(5, 8)]
        + [(3, gene) for gene in gene_ids(100, 10)]
        + [(5, gene) for gene in gene_ids(200, 3)]
    )
    return FakeSession(86, pathway_pairs, gene_pairs)

def read_lines(path):
    with open(path, newline='') as f:
        return f.read().split(os.linesep)[:-1]

def test_pipeline_initialization_from_path(tmp_path):
    """Test pipeline initialization with a configuration path."""
    config_path = generate_default_config(tmp_path / 'config.toml')
    pipeline = GeneSetExportPipeline(config_path)

    assert isinstance(pipeline.config, ExportConfig)
    assert pipeline.minimum_gene_set_size == 10

def test_export(config, session):
    """Test the full export against fabricated query results."""
    pipeline = GeneSetExportPipeline(config)
    output_file = pipeline.export(session)

    assert output_file == Path(config.get_output_path()) / 'Reactome_GeneSet_86.txt'
    lines = read_lines(output_file)
    assert len(lines) == 3
    assert lines[0] == 'Gene_Set_Name\tBrief_Description\tExternal_Link\tNCBI Gene IDs'
    assert lines[1] == '\t'.join([
        'REACTOME_IMMUNE_SYSTEM',
        'Genes involved in Immune System',
        'https://reactome.org/content/detail/R-HSA-10',
        '"' + ', '.join(sorted(gene_ids(100, 10))) + '"',
    ])
    assert lines[2] == '\t'.join([
        'REACTOME_CELL_CYCLE',
        'Genes involved in Cell  Cycle',
        'https://reactome.org/content/detail/R-HSA-5',
        '"' + ', '.join(sorted(gene_ids(1, 12))) + '"',
    ])
    assert not any('R-HSA-2\t' in line or line.endswith('R-HSA-2') for line in lines)

def test_export_reads_release_number_once(config, session):
    """Test that each query is issued exactly once."""
    GeneSetExportPipeline(config).export(session)
    assert len(session.queries) == 3
    assert sum('DBInfo' in query for query in session.queries) == 1

def test_export_to_explicit_directory(config, session, tmp_path):
    """Test overriding the output directory."""
    output_file = GeneSetExportPipeline(config).export(session, output_dir=tmp_path / 'elsewhere')
    assert output_file.parent == tmp_path / 'elsewhere'
    assert output_file.exists()

def test_export_appends_to_existing_report(config, session):
    """Test that a second export for the same release appends lines."""
    pipeline = GeneSetExportPipeline(config)
    pipeline.export(session)
    output_file = pipeline.export(session)

    lines = read_lines(output_file)
    assert len(lines) == 6
    assert lines[3] == lines[0]

def test_run_uses_configured_session(config, session):
    """Test that run opens one session and writes the report."""
    @contextmanager
    def fake_open_session(run_config):
        assert run_config is config
        yield session

    with patch("gsea_export.pipeline.open_session", fake_open_session):
        output_file = GeneSetExportPipeline(config).run()

    assert output_file.name == 'Reactome_GeneSet_86.txt'
    assert len(read_lines(output_file)) == 3

def test_run_propagates_data_access_error(config):
    """Test that a query failure aborts the export."""
    class BrokenSession:
        def run(self, query, **parameters):
            raise ServiceUnavailable("database offline")

    @contextmanager
    def fake_open_session(run_config):
        yield BrokenSession()

    with patch("gsea_export.pipeline.open_session", fake_open_session):
        with pytest.raises(DataAccessError, match="database offline"):
            GeneSetExportPipeline(config).run()

    assert not config.get_output_path().exists()
