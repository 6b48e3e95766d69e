"""Shared pytest fixtures for all tests."""

import shutil
import uuid
from pathlib import Path

import pytest


def _create_workspace_temp_dir(kind: str) -> Path:
    """Create a temporary directory under repository-local .pytest_work."""
    repo_root = Path(__file__).resolve().parents[1]
    root_dir = repo_root / ".pytest_work" / kind
    root_dir.mkdir(parents=True, exist_ok=True)
    temp_dir = root_dir / f"{kind}_{uuid.uuid4().hex[:8]}"
    temp_dir.mkdir(parents=True, exist_ok=True)
    return temp_dir


@pytest.fixture
def temp_config_dir():
    """Create temporary directory for config files."""
    temp_dir = _create_workspace_temp_dir("config")
    yield temp_dir
    shutil.rmtree(temp_dir, ignore_errors=True)


@pytest.fixture
def temp_logs_dir():
    """Create temporary directory for log files."""
    temp_dir = _create_workspace_temp_dir("logs")
    yield temp_dir
    shutil.rmtree(temp_dir, ignore_errors=True)


@pytest.fixture
def reasoning_reply_chunks():
    """Typical streamed reply with a reasoning block split mid-marker."""
    return [
        "Starting content <th",
        "ink>This is reasoning content that spans ",
        "multiple chunks and includes some complex ",
        "analysis of the problem</th",
        "ink> and this is the final content.",
    ]


@pytest.fixture
def make_chunk_source():
    """Build an async chunk source from a list, optionally failing at the end."""
    def _factory(chunks, error=None):
        async def _source():
            for chunk in chunks:
                yield chunk
            if error is not None:
                raise error

        return _source()

    return _factory
