from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest
from click.testing import CliRunner

_SAMPLE_DECLARATIONS = """\
program = "deploy"

[[flag]]
name = "region"
env_vars = ["DEPLOY_REGION", "AWS_REGION"]
default = "us-east-1"
usage = "Target region"

[[flag]]
name = "retries"
type = "int"
env_var = "DEPLOY_RETRIES"
default = 3
aliases = ["r"]

[[flag]]
name = "timeout"
type = "float64"
default = "2.5"

[[flag]]
name = "dry-run"
type = "bool"
env_vars = ["DEPLOY_DRY_RUN"]
hidden = true
"""


@pytest.fixture
def runner() -> CliRunner:
    """Provide a Click runner configured for CLI smoke tests."""

    return CliRunner()


@pytest.fixture
def write_declarations(tmp_path: Path) -> Callable[[str], Path]:
    """Write TOML text to a declarations file under ``tmp_path`` and return its path."""

    def _write(text: str) -> Path:
        path = tmp_path / "flags.toml"
        path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def sample_declarations(write_declarations: Callable[[str], Path]) -> Path:
    """Declarations covering string, int, float and bool flags with env fallbacks."""

    return write_declarations(_SAMPLE_DECLARATIONS)
