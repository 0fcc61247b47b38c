from __future__ import annotations

from pathlib import Path  # noqa: TC003

import pytest

from nexus.adapters.documents import (
    InMemoryDocumentSource,
    LocalDirectoryDocumentSource,
    guess_media_type,
)
from nexus.domain.errors import DocumentNotFoundError, UnsupportedDocumentError
from nexus.domain.ports.documents import DocumentMetadata, DocumentSource


@pytest.fixture
def ingest_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "ingest"
    directory.mkdir()
    (directory / "board-notes.md").write_text("# Board\nPhoenix is slipping.", encoding="utf-8")
    (directory / "standup.txt").write_text("Atlas on track.", encoding="utf-8")
    (directory / "deck.pdf").write_bytes(b"%PDF-1.7")
    (directory / ".gitkeep").write_text("")
    (directory / "archive").mkdir()
    return directory


def test_lists_visible_files_sorted(ingest_dir: Path) -> None:
    source = LocalDirectoryDocumentSource(ingest_dir)

    documents = source.list_documents()

    assert documents == [
        DocumentMetadata(id="board-notes.md", name="board-notes.md", media_type="text/markdown"),
        DocumentMetadata(id="deck.pdf", name="deck.pdf", media_type="application/pdf"),
        DocumentMetadata(id="standup.txt", name="standup.txt", media_type="text/plain"),
    ]


def test_reads_text_documents(ingest_dir: Path) -> None:
    source = LocalDirectoryDocumentSource(ingest_dir)

    assert source.read_document("standup.txt") == "Atlas on track."
    assert source.read_document("board-notes.md").startswith("# Board")


def test_binary_documents_are_unsupported(ingest_dir: Path) -> None:
    with pytest.raises(UnsupportedDocumentError, match="application/pdf"):
        LocalDirectoryDocumentSource(ingest_dir).read_document("deck.pdf")


def test_unknown_document_raises(ingest_dir: Path) -> None:
    with pytest.raises(DocumentNotFoundError) as excinfo:
        LocalDirectoryDocumentSource(ingest_dir).read_document(".gitkeep")

    assert excinfo.value.document_id == ".gitkeep"


def test_missing_directory_lists_nothing(tmp_path: Path) -> None:
    assert LocalDirectoryDocumentSource(tmp_path / "missing").list_documents() == []


def test_in_memory_source() -> None:
    source = InMemoryDocumentSource.from_mapping({"email-1": "Phoenix escalated"})

    assert [document.id for document in source.list_documents()] == ["email-1"]
    assert source.read_document("email-1") == "Phoenix escalated"
    with pytest.raises(DocumentNotFoundError):
        source.read_document("email-2")


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("notes.MD", "text/markdown"),
        ("notes.txt", "text/plain"),
        ("no-extension", "application/octet-stream"),
    ],
)
def test_guess_media_type(name: str, expected: str) -> None:
    assert guess_media_type(name) == expected


def test_sources_satisfy_port(tmp_path: Path) -> None:
    assert isinstance(LocalDirectoryDocumentSource(tmp_path), DocumentSource)
    assert isinstance(InMemoryDocumentSource(), DocumentSource)
