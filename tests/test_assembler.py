import pytest

from lease_abstraction.assembler import TextCache
from lease_abstraction.config import DOCUMENT_BOUNDARY, PAGE_BREAK
from lease_abstraction.documents import SourceDocument, document_set_key
from lease_abstraction.errors import AcquisitionError

from .conftest import FakeOcrWorker, make_document, native_page


def test_original_lease_and_amendment_scenario(assembler, acquirer, ocr_events):
    original = make_document("Original Lease", [native_page(f"ORIG{i}") for i in range(1, 6)])
    amendment = make_document("First Amendment", [native_page("AMEND1"), None])
    messages = []

    text = assembler.assemble([original, amendment], messages.append)

    assert text.count(DOCUMENT_BOUNDARY) == 1
    assert text.count(PAGE_BREAK) == 4 + 1
    assert ocr_events == ["start", "ocr", "close"]
    assert acquirer.calls == 7
    assert "Running OCR on First Amendment page 2..." in messages
    assert messages[0] == "Reading Original Lease: page 1 of 5..."


def test_document_and_page_order_is_preserved(assembler):
    docs = [
        make_document(name, [native_page(f"{name}P{p}") for p in range(1, 4)])
        for name in ("DOCA", "DOCB", "DOCC")
    ]

    text = assembler.assemble(docs)

    segments = text.split(DOCUMENT_BOUNDARY)
    assert len(segments) == 3
    for name, segment in zip(("DOCA", "DOCB", "DOCC"), segments):
        pages = segment.split(PAGE_BREAK)
        assert len(pages) == 3
        for number, page in enumerate(pages, start=1):
            assert page.startswith(f"{name}P{number} ")


def test_assemble_writes_cache_and_get_text_reuses_it(assembler, acquirer):
    docs = [make_document("lease.pdf", [native_page("A"), native_page("B")])]

    first = assembler.get_text(docs)
    second = assembler.get_text(docs)

    assert first == second
    assert acquirer.calls == 2
    assert assembler.cache.get(document_set_key(docs)) == first


def test_changed_document_set_misses_cache(assembler, acquirer):
    lease = make_document("lease.pdf", [native_page("A")])
    amendment = make_document("amendment.pdf", [native_page("B")])

    assembler.get_text([lease])
    assembler.get_text([lease, amendment])

    assert acquirer.calls == 3


def test_unreadable_document_is_attributed(assembler):
    good = make_document("lease.pdf", [native_page("A")])
    broken = SourceDocument(name="broken.pdf", data=b"not a pdf at all")

    with pytest.raises(AcquisitionError) as excinfo:
        assembler.assemble([good, broken])

    assert excinfo.value.document_name == "broken.pdf"
    assert "broken.pdf" in str(excinfo.value)
    assert assembler.cache.get(document_set_key([good, broken])) is None


def test_ocr_failure_aborts_and_releases_worker(assembler, acquirer, ocr_events):
    acquirer.ocr_factory = lambda: FakeOcrWorker(ocr_events, fail=True)
    scanned = make_document("scan.pdf", [None, native_page("LATER")])

    with pytest.raises(AcquisitionError) as excinfo:
        assembler.assemble([scanned])

    assert excinfo.value.document_name == "scan.pdf"
    assert ocr_events == ["start", "ocr", "close"]
    # no partial document: the page after the failure is never read
    assert acquirer.calls == 1


def test_ocr_worker_is_scoped_per_document(assembler, ocr_events):
    docs = [
        make_document("one.pdf", [None, None]),
        make_document("two.pdf", [native_page("X")]),
        make_document("three.pdf", [None]),
    ]

    assembler.assemble(docs)

    assert ocr_events == ["start", "ocr", "ocr", "close", "start", "ocr", "close"]


def test_text_cache_only_returns_matching_key():
    cache = TextCache()
    cache.put("a", "text a")
    assert cache.get("a") == "text a"
    assert cache.get("b") is None
    cache.put("b", "text b")
    assert cache.get("a") is None
    cache.clear()
    assert cache.get("b") is None
