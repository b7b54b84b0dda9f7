#!/usr/bin/env python3

"""
Pytest configuration and shared fixtures for repo-mirror test suite.
"""

import os
import sys
import tempfile
import shutil
import pytest
from unittest.mock import Mock
from pathlib import Path

# Add src to Python path for imports
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from repo_mirror.config.manager import MirrorConfig
from repo_mirror.storage.manager import MirrorStore
from repo_mirror.sync.engines import GitRunner
from repo_mirror.sync.results import OperationResult


@pytest.fixture
def temp_dir():
    """Provide a temporary directory that gets cleaned up after test"""
    temp_dir = tempfile.mkdtemp()
    yield temp_dir

    # Cleanup
    if os.path.exists(temp_dir):
        shutil.rmtree(temp_dir)


@pytest.fixture
def repo_list_file(temp_dir):
    """Write a repository list and return its path"""
    def _write(lines):
        path = os.path.join(temp_dir, "repos.txt")
        with open(path, "w", encoding="utf-8") as f:
            f.write("\n".join(lines) + "\n")
        return path
    return _write


@pytest.fixture
def sample_config(temp_dir):
    """Provide a full-clone configuration rooted in the temp directory"""
    return MirrorConfig(
        repo_list=os.path.join(temp_dir, "repos.txt"),
        target_group="https://git.example.com/mirrors",
        temp_root=os.path.join(temp_dir, "work"),
        retry_count=2,
        log_file=os.path.join(temp_dir, "migration.log"),
    )


@pytest.fixture
def incremental_config(sample_config):
    sample_config.incremental = True
    return sample_config


@pytest.fixture
def dry_run_config(sample_config):
    sample_config.dry_run = True
    return sample_config


@pytest.fixture
def mirror_store(sample_config):
    return MirrorStore(sample_config)


@pytest.fixture
def mock_runner():
    """Provide a GitRunner mock that succeeds unless configured otherwise"""
    runner = Mock(spec=GitRunner)
    runner.run.return_value = OperationResult(True)
    return runner


@pytest.fixture
def make_clone_runner():
    """Build a runner whose clones create the destination directory like git does"""
    def _make(clone_results, other_result=None):
        results = list(clone_results)
        runner = Mock(spec=GitRunner)

        def run(args, cwd=None):
            if args[0] == 'clone':
                result = results.pop(0)
                if result:
                    os.makedirs(args[-1], exist_ok=True)
                return result
            return other_result if other_result is not None else OperationResult(True)

        runner.run.side_effect = run
        return runner
    return _make
