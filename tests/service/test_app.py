"""Tests for the FastAPI service mode."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from spacecompiler.orchestrator import Orchestrator
from spacecompiler.service import create_app
from tests._fixtures.archive_builder import ArchiveBuilder


@pytest.fixture
def client() -> TestClient:
    return TestClient(create_app(Orchestrator))


def test_health_endpoint(client: TestClient) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_compile_file_endpoint(client: TestClient) -> None:
    response = client.post(
        "/compile/file",
        json={"content": "Hello world this is a test", "fileName": "test.txt"},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["attentionMatrix"]["scores"] == [[1.0]]
    assert data["attentionMatrix"]["coherence"] == [[1.0]]


def test_compile_files_endpoint(client: TestClient) -> None:
    response = client.post(
        "/compile/files",
        json={"files": {"a.txt": "Alpha document text.", "b.txt": ""}},
    )
    assert response.status_code == 200
    data = response.json()
    assert [resource["resourceId"] for resource in data["resources"]] == ["a.txt"]
    assert data["warnings"] == ["No fragments extracted from b.txt"]


def test_compile_project_endpoint(client: TestClient) -> None:
    archive = (
        ArchiveBuilder()
        .add("site.spaceproj", "Site\n  [Home](home.md)\n  [Gone](gone.md)\n")
        .add("pages/home.md", "# Home\n\nWelcome to the site.\n")
        .build()
    )

    response = client.post(
        "/compile/project",
        content=archive,
        headers={"Content-Type": "application/zip"},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["warnings"] == ["File not found in archive: gone.md"]
    assert data["metadata"]["project_graph"]["roots"][0]["children"][0]["resolved"] is True


def test_compile_project_endpoint_without_descriptor(client: TestClient) -> None:
    archive = ArchiveBuilder().add("home.md", "Welcome.\n").build()

    response = client.post("/compile/project", content=archive)
    assert response.status_code == 200
    data = response.json()
    assert data["success"] is False
    assert data["attentionMatrix"] is None
    assert data["errors"] == ["No .spaceproj file found in archive"]
