"""
Pytest configuration and shared fixtures for BibShelf tests.

Provides reusable bibliography fixtures and an API client wired to them.
"""

import sys
from pathlib import Path
from typing import Generator

import pytest
from fastapi.testclient import TestClient

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))


SAMPLE_BIBTEX = """% Exported bibliography
% generated for tests

@article{smith2021deep,
  title = {Deep Learning for Protein Folding},
  author = {Smith, John and
            Doe, Jane},
  year = {2021},
  month = {March},
  day = {5},
  journal = {Nature AI},
  note = {Cited by 42},
  url = {https://example.org/smith2021}
}

@inproceedings{brown2019graphs,
  title = {Graph Networks at Scale},
  author = {Brown, Alice},
  booktitle = {Proceedings of the Graph Conference},
  year = {2019},
  month = {jul},
  note = {Cited by None}
}

@article{lee2021ai,
  title = {AI Systems in Clinical Practice},
  author = {Lee, Kim and Smith, Robert},
  year = {2021},
  month = {jan},
  journal = {Journal of Medical Informatics},
  note = {Cited by 7}
}

@misc{anon,
  title = {An Undated Technical Note},
  journal = {Internal Reports}
}
"""


# =============================================================================
# Configuration Fixtures
# =============================================================================
@pytest.fixture(scope="session")
def test_settings():
    """Override settings for testing environment."""
    from shared.utils import Settings

    return Settings(
        environment="testing",
        log_level="DEBUG",
        api_host="localhost",
        api_port=3000,
        cache_ttl_seconds=60,
    )


# =============================================================================
# Test Data Fixtures
# =============================================================================
@pytest.fixture
def sample_bibtex() -> str:
    """Small bibliography with dated, undated and partially filled entries."""
    return SAMPLE_BIBTEX


@pytest.fixture
def bib_file(tmp_path, sample_bibtex) -> Path:
    """Sample bibliography written to a temporary file."""
    path = tmp_path / "citations.bib"
    path.write_text(sample_bibtex, encoding="utf-8")
    return path


@pytest.fixture
def make_publication():
    """Factory for Publication records with sensible defaults."""
    from shared.models import Publication

    def _make(**overrides):
        fields = {
            "title": "A Study",
            "authors": "Doe, Jane",
            "year": "2020",
            "journal": "Journal of Tests",
            "citations": 0,
            "url": "#",
            "bibtex": "@article{x,\n}",
            "timestamp": None,
        }
        fields.update(overrides)
        return Publication(**fields)

    return _make


# =============================================================================
# API Client Fixtures
# =============================================================================
@pytest.fixture
def publication_service(bib_file):
    """PublicationService backed by the sample bibliography."""
    from services.api.src.publications import PublicationService

    return PublicationService.from_source(bib_file, ttl_seconds=60)


@pytest.fixture
def api_client(publication_service) -> Generator:
    """
    FastAPI test client.

    Runs the application lifespan, then swaps in a service reading the
    sample bibliography.
    """
    from services.api.src.main import app

    with TestClient(app) as client:
        app.state.publication_service = publication_service
        yield client


# =============================================================================
# Pytest Hooks
# =============================================================================
def pytest_configure(config):
    """Configure pytest environment."""
    # Set testing environment variable
    import os

    os.environ["ENVIRONMENT"] = "testing"
    os.environ["LOG_LEVEL"] = "DEBUG"


def pytest_collection_modifyitems(config, items):
    """
    Automatically mark tests based on their location.

    - tests/unit/ -> @pytest.mark.unit
    - tests/integration/ -> @pytest.mark.integration
    """
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
