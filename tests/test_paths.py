from datetime import datetime, timezone

from papeleo.domain.paths import (
    build_storage_path,
    candidate_storage_paths,
    docgen_document_id,
    extra_document_path,
    is_docgen_url,
    sanitize_file_name,
    storage_path_from_url,
)

BUCKET = "contractual"
DOCGEN = "https://docgen.test/document"


def test_sanitize_file_name():
    assert sanitize_file_name("  Cédula Ciudadanía (1).PDF ") == "cdula-ciudadana-1.pdf"
    assert sanitize_file_name("RUT 2024.pdf") == "rut-2024.pdf"


def test_build_storage_path():
    assert build_storage_path("contracts", "p1", "Contrato Final.docx") == "contracts/p1/contrato-final.docx"


def test_extra_document_path_keeps_only_extension():
    stamp = datetime(2024, 1, 1, tzinfo=timezone.utc)
    path = extra_document_path("m1", "d1", "Foto Obra.JPG", stamp)
    assert path == f"extra/m1/d1_{int(stamp.timestamp() * 1000)}.jpg"


def test_storage_path_from_public_and_signed_urls():
    public = f"https://s.test/storage/v1/object/public/{BUCKET}/contracts/p1/a%20b.pdf"
    signed = f"https://s.test/storage/v1/object/sign/{BUCKET}/contracts/p1/a.pdf?token=x"
    assert storage_path_from_url(public, BUCKET) == "contracts/p1/a b.pdf"
    assert storage_path_from_url(signed, BUCKET) == "contracts/p1/a.pdf"
    assert storage_path_from_url("contracts/p1/a.pdf", BUCKET) == "contracts/p1/a.pdf"
    assert storage_path_from_url(f"{BUCKET}/contracts/p1/a.pdf", BUCKET) == "contracts/p1/a.pdf"


def test_candidate_paths_start_with_exact_path():
    url = f"https://s.test/storage/v1/object/public/{BUCKET}/precontractualdocuments/m1/rut.pdf"
    assert candidate_storage_paths(url, BUCKET) == [
        "precontractualdocuments/m1/rut.pdf",
        "precontractualdocuments/m1",
    ]


def test_candidate_paths_try_pdf_when_extension_missing():
    assert candidate_storage_paths("contracts/p1/borrador", BUCKET) == [
        "contracts/p1/borrador",
        "contracts/p1",
        "contracts/p1/borrador.pdf",
        "contracts/p1.pdf",
    ]


def test_candidate_paths_for_deep_legacy_paths():
    candidates = candidate_storage_paths("a/b/c/d/e.pdf", BUCKET)
    assert candidates == ["a/b/c/d/e.pdf", "a/b/c/d", "a/b/c/e.pdf", "a/b/c"]
    assert len(candidates) == len(set(candidates))


def test_candidate_paths_short_path_is_only_itself():
    assert candidate_storage_paths("file.pdf", BUCKET) == ["file.pdf"]


def test_docgen_urls():
    assert is_docgen_url(f"{DOCGEN}/abc-123", DOCGEN)
    assert not is_docgen_url("https://storage.test/x.pdf", DOCGEN)
    assert not is_docgen_url(None, DOCGEN)
    assert docgen_document_id(f"{DOCGEN}/abc-123", DOCGEN) == "abc-123"
    assert docgen_document_id(DOCGEN, DOCGEN) is None
