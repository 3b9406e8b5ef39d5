from pathlib import Path

import pytest

SAMPLE_PROJECT = Path(__file__).resolve().parent.parent / "examples" / "sample-java-project"


@pytest.fixture
def sample_project() -> Path:
    return SAMPLE_PROJECT


@pytest.fixture
def maven_project(tmp_path) -> Path:
    (tmp_path / "pom.xml").write_text(
        "<project><artifactId>demo</artifactId></project>\n", encoding="utf-8"
    )
    return tmp_path
