"""Pytest configuration and fixtures for holder snapshot tests."""

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable

import pytest

from holder_metrics.core.config import EngineConfig
from holder_metrics.core.models import Holder

TREASURY = "0xDeAdBeEf00000000000000000000000000000001"
BRIDGE = "0xb41d9e0000000000000000000000000000000002"


@pytest.fixture
def engine_config() -> EngineConfig:
    """Two configured chains, retail threshold of 1K."""
    return EngineConfig(
        retail_threshold=1_000,
        mega_holder_threshold=20_000_000_000,
        total_supply=100_000_000_000,
        denylist=[TREASURY, BRIDGE],
        chains={
            "ethereum": {"label": "Ethereum"},
            "polygon": "Polygon",
        },
    )


@pytest.fixture
def generated_at() -> datetime:
    """Fixed snapshot timestamp."""
    return datetime(2026, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def make_holders() -> Callable[..., list[Holder]]:
    """Build holders from balances, sorted descending like the aggregator does."""

    def _make(balances: list[float], chain: str = "Ethereum") -> list[Holder]:
        holders = [
            Holder(address=f"0x{i:040x}", balance=float(b), chain=chain)
            for i, b in enumerate(balances, 1)
        ]
        return sorted(holders, key=lambda h: h.balance, reverse=True)

    return _make


@pytest.fixture
def sample_rows() -> list[dict[str, Any]]:
    """Mock Dune result rows across two configured chains and one unknown chain."""
    return [
        # ethereum
        {"blockchain": "ethereum", "address": "0xAAAA000000000000000000000000000000000001", "telcoin_balance": 5_000_000},
        {"blockchain": "ethereum", "address": "\\xaaaa000000000000000000000000000000000002", "telcoin_balance": "250000"},
        {"blockchain": "ethereum", "address": "aaaa000000000000000000000000000000000003", "telcoin_balance": 1_500},
        {"blockchain": "ethereum", "address": TREASURY.lower(), "telcoin_balance": 9_000_000_000},
        {"blockchain": "ethereum", "address": "0xaaaa000000000000000000000000000000000004", "telcoin_balance": 25_000_000_000},
        {"blockchain": "ethereum", "address": "0xaaaa000000000000000000000000000000000005", "telcoin_balance": 500},
        {"blockchain": "ethereum", "address": "", "telcoin_balance": 1_000_000},
        {"blockchain": "ethereum", "address": "0xaaaa000000000000000000000000000000000006", "telcoin_balance": "not-a-number"},
        # polygon
        {"chain": "Polygon", "address": "0xBBBB000000000000000000000000000000000001", "amount": 120_000_000},
        {"chain": "polygon", "address": "0xbbbb000000000000000000000000000000000002", "amount": 40_000},
        {"chain": "polygon", "address": BRIDGE, "amount": 3_000},
        # not configured
        {"blockchain": "solana", "address": "0xcccc000000000000000000000000000000000001", "telcoin_balance": 10_000},
    ]


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    """YAML config with an external exclusions file."""
    (tmp_path / "exclusions.json").write_text(json.dumps([TREASURY, BRIDGE]), encoding="utf-8")
    path = tmp_path / "snapshot.yaml"
    path.write_text(
        "total_supply: 100000000000\n"
        "thresholds:\n"
        "  retail: 1000\n"
        "  mega_holder: 20000000000\n"
        "chains:\n"
        "  ethereum:\n"
        "    label: Ethereum\n"
        "  polygon: Polygon\n"
        "exclusions_file: exclusions.json\n",
        encoding="utf-8",
    )
    return path


@pytest.fixture
def rows_file(tmp_path: Path, sample_rows: list[dict[str, Any]]) -> Path:
    """Sample rows saved as a Dune-style results document."""
    path = tmp_path / "rows.json"
    path.write_text(json.dumps({"result": {"rows": sample_rows}}), encoding="utf-8")
    return path
