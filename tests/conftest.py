from pathlib import Path

import pytest
from click.testing import CliRunner

DATA_DIR = Path(__file__).parent / "data"


@pytest.fixture()
def cli_runner() -> CliRunner:
    """Provides a reusable Click CLI runner."""
    return CliRunner()


@pytest.fixture()
def data_dir() -> Path:
    """Directory holding the sample shell scripts."""
    return DATA_DIR
