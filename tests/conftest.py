"""Shared pytest fixtures for Tandem tests.

Provides sample Org documents, project configurations and isolated settings.
"""

from pathlib import Path

import pytest
from typer.testing import CliRunner

from tandem.core import Project, ProjectConfig
from tandem.document import OrgDocument
from tandem.utils.config import reset_settings

# ============================================================================
# Sample documents
# ============================================================================

SAMPLE_ORG = """#+TITLE: Sample

* Source
Hello world. How are you?

Second paragraph.
* Translation
* Glossary
"""

# Already segmented, with matching segment counts
ALIGNED_ORG = """* Source
:PROPERTIES:
:ID:       src
:END:
µHello. µWorld.
* Translation
:PROPERTIES:
:ID:       tr
:END:
µBonjour. µMonde.
* Glossary
:PROPERTIES:
:ID:       glo
:END:
"""

APPLE_ORG = """* Source
I ate an apple today.
* Translation
J'ai mangé une pomme aujourd'hui.
* Glossary
"""


@pytest.fixture
def sample_text() -> str:
    return SAMPLE_ORG


@pytest.fixture
def sample_document() -> OrgDocument:
    """Unsegmented document with source, translation and glossary sections."""
    return OrgDocument(SAMPLE_ORG)


@pytest.fixture
def aligned_document() -> OrgDocument:
    """Segmented document: Hello./World. against Bonjour./Monde."""
    return OrgDocument(ALIGNED_ORG)


@pytest.fixture
def apple_document() -> OrgDocument:
    return OrgDocument(APPLE_ORG)


@pytest.fixture
def project_config() -> ProjectConfig:
    return ProjectConfig(name="test")


@pytest.fixture
def aligned_project(aligned_document: OrgDocument, project_config: ProjectConfig) -> Project:
    """Activated project over the aligned document."""
    project = Project(aligned_document, project_config)
    project.activate()
    return project


@pytest.fixture
def apple_project(apple_document: OrgDocument, project_config: ProjectConfig) -> Project:
    """Activated and segmented project over the apple document."""
    project = Project(apple_document, project_config)
    project.activate()
    project.segment()
    return project


# ============================================================================
# Environment isolation
# ============================================================================


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Keep settings and the project registry away from the user's home."""
    for name in (
        "TANDEM_SEGMENT_DELIMITER",
        "TANDEM_SEGMENTATION_STRATEGY",
        "TANDEM_SEGMENTATION_REGEX",
        "TANDEM_SOURCE_LOCATOR",
        "TANDEM_TRANSLATION_LOCATOR",
        "TANDEM_GLOSSARY_LOCATOR",
        "TANDEM_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("TANDEM_REGISTRY_PATH", str(tmp_path / "registry" / "projects.json"))
    monkeypatch.chdir(tmp_path)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def cli_runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def org_file(tmp_path: Path) -> Path:
    """Sample document written to disk."""
    path = tmp_path / "novel.org"
    path.write_text(SAMPLE_ORG, encoding="utf-8")
    return path


@pytest.fixture
def aligned_file(tmp_path: Path) -> Path:
    path = tmp_path / "aligned.org"
    path.write_text(ALIGNED_ORG, encoding="utf-8")
    return path


@pytest.fixture
def apple_file(tmp_path: Path) -> Path:
    path = tmp_path / "apple.org"
    path.write_text(APPLE_ORG, encoding="utf-8")
    return path
