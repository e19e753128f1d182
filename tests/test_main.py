from lease_abstraction.assembler import text_cache

import main

from .conftest import make_pdf


def test_cli_documents_share_the_text_cache(tmp_path):
    lease = tmp_path / "lease.pdf"
    lease.write_bytes(make_pdf(["Lease text"]))
    documents = main._load_documents([lease])
    key = documents.identity
    text_cache.put(key, "cached text")

    documents.remove("lease.pdf")

    assert text_cache.get(key) is None
