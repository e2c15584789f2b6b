"""Tests for the snapshot orchestrator."""

import json

import pytest

from holder_metrics.core.config import EngineConfig
from holder_metrics.core.exceptions import DataSourceError, EmptyDatasetError
from holder_metrics.orchestrator import SnapshotOrchestrator
from holder_metrics.providers.file_rows import FileRowsProvider


class TestSnapshotOrchestrator:
    """Tests for SnapshotOrchestrator class."""

    def test_build(self, engine_config, sample_rows, generated_at):
        """Test a full snapshot from sample rows."""
        snapshot = SnapshotOrchestrator(engine_config).build(sample_rows, generated_at=generated_at)

        assert snapshot.generated_at == generated_at
        assert list(snapshot.chains) == ["ethereum", "polygon"]
        assert snapshot.chains["ethereum"].retail_holder_count == 3
        assert snapshot.chains["polygon"].retail_holder_count == 2
        assert snapshot.chains["polygon"].label == "Polygon"
        assert snapshot.combined.retail_holder_count == 5
        assert snapshot.combined.total_retail_supply == 125_291_500

    def test_unconfigured_chain_ignored(self, engine_config, sample_rows, generated_at):
        """Test rows for unconfigured chains are ignored."""
        snapshot = SnapshotOrchestrator(engine_config).build(sample_rows, generated_at=generated_at)
        assert "solana" not in snapshot.chains
        assert "solana" not in snapshot.combined.total_processed_by_chain

    def test_configured_chain_without_rows(self, sample_rows, generated_at):
        """Test a configured chain without rows gets an empty aggregate."""
        config = EngineConfig(chains={"base": "Base", "ethereum": "Ethereum"})
        snapshot = SnapshotOrchestrator(config).build(sample_rows, generated_at=generated_at)

        assert snapshot.chain_order == ["base", "ethereum"]
        assert snapshot.chains["base"].holders == []
        assert snapshot.chains["base"].total_processed == 0
        assert snapshot.combined.total_processed_by_chain["base"] == 0

    def test_no_chains_configured_uses_data(self, sample_rows, generated_at):
        """Test chains come from the data when none are configured."""
        snapshot = SnapshotOrchestrator(EngineConfig()).build(sample_rows, generated_at=generated_at)
        assert snapshot.chain_order == ["ethereum", "polygon", "solana"]
        assert snapshot.chains["solana"].label == "solana"

    def test_parallel_matches_sequential(self, engine_config, sample_rows, generated_at):
        """Test parallel aggregation matches sequential."""
        sequential = SnapshotOrchestrator(engine_config).build(sample_rows, generated_at=generated_at)
        parallel = SnapshotOrchestrator(engine_config, max_workers=4).build(
            sample_rows, generated_at=generated_at
        )
        assert parallel == sequential

    def test_empty_rows(self, engine_config):
        """Test empty input raises EmptyDatasetError."""
        with pytest.raises(EmptyDatasetError):
            SnapshotOrchestrator(engine_config).build([])

    def test_run_with_file_provider(self, engine_config, rows_file, generated_at):
        """Test running against a file provider."""
        snapshot = SnapshotOrchestrator(engine_config).run(
            FileRowsProvider(rows_file), generated_at=generated_at
        )
        assert snapshot.combined.retail_holder_count == 5

    def test_run_with_empty_file(self, engine_config, tmp_path):
        """Test an empty rows file raises EmptyDatasetError."""
        path = tmp_path / "empty.json"
        path.write_text("[]", encoding="utf-8")
        with pytest.raises(EmptyDatasetError):
            SnapshotOrchestrator(engine_config).run(FileRowsProvider(path))


class TestFileRowsProvider:
    """Tests for FileRowsProvider class."""

    def test_plain_list(self, tmp_path, sample_rows):
        """Test a plain JSON list of rows."""
        path = tmp_path / "rows.json"
        path.write_text(json.dumps(sample_rows), encoding="utf-8")
        assert FileRowsProvider(path).fetch_rows() == sample_rows

    def test_dune_document(self, rows_file, sample_rows):
        """Test a Dune results document."""
        provider = FileRowsProvider(rows_file)
        assert provider.is_available()
        assert provider.fetch_rows() == sample_rows

    def test_missing_file(self, tmp_path):
        """Test a missing rows file raises DataSourceError."""
        provider = FileRowsProvider(tmp_path / "missing.json")
        assert not provider.is_available()
        with pytest.raises(DataSourceError):
            provider.fetch_rows()

    def test_invalid_document(self, tmp_path):
        """Test a document without rows raises DataSourceError."""
        path = tmp_path / "bad.json"
        path.write_text('{"unexpected": true}', encoding="utf-8")
        with pytest.raises(DataSourceError):
            FileRowsProvider(path).fetch_rows()

    def test_invalid_json(self, tmp_path):
        """Test malformed JSON raises DataSourceError."""
        path = tmp_path / "broken.json"
        path.write_text("{", encoding="utf-8")
        with pytest.raises(DataSourceError):
            FileRowsProvider(path).fetch_rows()
