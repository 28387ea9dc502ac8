"""Tests for query-time context retrieval with a mocked Supabase client."""

from unittest.mock import MagicMock

import pytest

from concierge.core.document_processing.pdf_extractor import PdfTextExtractor
from concierge.core.ingestion import DocumentIndexer
from concierge.core.retrieval import ContextRetriever
from concierge.core.schemas_documents import DocumentOverrides
from concierge.db.documents import DocumentStore
from tests.fakes.fake_db import FakeDocumentStore, FakeTextBackend, fake_embed
from tests.fakes.fake_supabase import FakeSupabase, hybrid_search_handler, visual_assets_handler


def _mock_supabase(chunks=None, assets=None, rpc_error=None):
    """Supabase mock whose RPCs return canned rows."""
    sb = MagicMock()
    rows = {"hybrid_search": chunks or [], "search_visual_assets": assets or []}

    def rpc(name, params):
        call = MagicMock()
        if rpc_error is not None:
            call.execute.side_effect = rpc_error
        else:
            call.execute.return_value = MagicMock(data=list(rows[name]))
        return call

    sb.rpc.side_effect = rpc
    sb.storage.from_.return_value.create_signed_url.return_value = {
        "signedURL": "https://test.supabase.co/storage/v1/object/sign/assets/x.png?token=t"
    }
    return sb


def _chunk(document_id, n, score=0.9):
    return {
        "chunk_id": f"{document_id}-{n}",
        "document_id": document_id,
        "content": f"chunk {n} of {document_id}",
        "chunk_type": "text",
        "document_title": f"Title {document_id}",
        "document_type": "case_study",
        "combined_score": score,
    }


def _asset(document_id, n):
    return {
        "asset_id": f"asset-{document_id}-{n}",
        "document_id": document_id,
        "storage_path": f"{document_id}/{n}.png",
        "bucket_name": "assets",
        "asset_type": "image",
    }


@pytest.fixture
def tagged_store():
    store = FakeDocumentStore()
    for doc_id, caps, inds in [
        ("doc-a", ["brand-strategy"], ["technology"]),
        ("doc-b", ["brand-strategy"], ["finance"]),
        ("doc-c", ["video-production"], ["technology"]),
    ]:
        store.documents[doc_id] = {
            "id": doc_id,
            "slug": doc_id,
            "doc_type": "case_study",
            "capability_slugs": caps,
            "industry_slugs": inds,
        }
    return store


def _retriever(sb, store=None):
    retriever = ContextRetriever(sb, embed=fake_embed)
    if store is not None:
        retriever.store = store
    return retriever


class TestRetrieve:
    def test_bounds(self):
        chunks = [_chunk("doc-a", i) for i in range(15)]
        assets = [_asset("doc-a", i) for i in range(8)]
        sb = _mock_supabase(chunks, assets)

        context = _retriever(sb).retrieve("brand strategy", max_chunks=10, max_assets=5)

        assert len(context.chunks) == 10
        assert len(context.visual_assets) == 5

    def test_rpc_params(self):
        sb = _mock_supabase()

        _retriever(sb).retrieve(
            "launch story", capability_slugs=["brand-strategy"], max_chunks=7, max_assets=3
        )

        calls = {c.args[0]: c.args[1] for c in sb.rpc.call_args_list}
        assert calls["hybrid_search"]["query_text"] == "launch story"
        assert calls["hybrid_search"]["capability_slugs"] == ["brand-strategy"]
        assert calls["hybrid_search"]["industry_slugs"] is None
        assert calls["hybrid_search"]["match_count"] == 7
        assert len(calls["hybrid_search"]["query_embedding"]) == 1536
        assert calls["search_visual_assets"]["match_count"] == 3

    def test_filters_are_conjunctive_across_kinds(self, tagged_store):
        chunks = [_chunk("doc-a", 0), _chunk("doc-b", 0), _chunk("doc-c", 0)]
        assets = [_asset("doc-a", 0), _asset("doc-b", 0)]
        sb = _mock_supabase(chunks, assets)

        context = _retriever(sb, tagged_store).retrieve(
            "tech brand work",
            capability_slugs=["brand-strategy"],
            industry_slugs=["technology"],
        )

        assert {c["document_id"] for c in context.chunks} == {"doc-a"}
        assert {a["document_id"] for a in context.visual_assets} == {"doc-a"}

    def test_filters_are_disjunctive_within_kind(self, tagged_store):
        chunks = [_chunk("doc-a", 0), _chunk("doc-b", 0), _chunk("doc-c", 0)]
        sb = _mock_supabase(chunks)

        context = _retriever(sb, tagged_store).retrieve(
            "anything", capability_slugs=["brand-strategy", "video-production"]
        )

        assert [c["document_id"] for c in context.chunks] == ["doc-a", "doc-b", "doc-c"]

    def test_untagged_document_excluded(self, tagged_store):
        sb = _mock_supabase([_chunk("doc-unknown", 0), _chunk("doc-a", 0)])

        context = _retriever(sb, tagged_store).retrieve("q", industry_slugs=["technology"])

        assert [c["document_id"] for c in context.chunks] == ["doc-a"]

    def test_assets_are_signed(self):
        sb = _mock_supabase(assets=[_asset("doc-a", 0)])

        context = _retriever(sb).retrieve("visuals")

        asset = context.visual_assets[0]
        assert asset["signed_url"].startswith("https://test.supabase.co/storage/v1/object/sign/")
        sb.storage.from_.assert_called_with("assets")

    def test_empty_index(self):
        context = _retriever(_mock_supabase()).retrieve("anything at all")

        assert context.chunks == []
        assert context.visual_assets == []
        assert context.is_empty

    def test_rpc_failure_returns_empty(self):
        sb = _mock_supabase(rpc_error=RuntimeError("connection reset"))

        context = _retriever(sb).retrieve("anything")

        assert context.is_empty

    def test_embedding_failure_returns_empty(self):
        sb = _mock_supabase([_chunk("doc-a", 0)])

        def broken_embed(text):
            raise RuntimeError("openai down")

        context = ContextRetriever(sb, embed=broken_embed).retrieve("anything")

        assert context.is_empty
        sb.rpc.assert_not_called()

    def test_blank_query(self):
        sb = _mock_supabase([_chunk("doc-a", 0)])

        assert _retriever(sb).retrieve("   ").is_empty
        sb.rpc.assert_not_called()

    def test_zero_budgets(self):
        sb = _mock_supabase([_chunk("doc-a", 0)])

        assert _retriever(sb).retrieve("q", max_chunks=0, max_assets=0).is_empty
        sb.rpc.assert_not_called()


class TestEndToEnd:
    """Ingest case study pages through the real store, then query with filters."""

    @pytest.fixture
    def sb(self, tmp_path):
        sb = FakeSupabase()
        sb.rpc_handlers["hybrid_search"] = hybrid_search_handler
        sb.rpc_handlers["search_visual_assets"] = visual_assets_handler

        indexer = DocumentIndexer(
            DocumentStore(sb),
            embed=fake_embed,
            extractor=PdfTextExtractor([FakeTextBackend()]),
        )
        for page, client, industries in [
            (2, "Renew Home", ["technology"]),
            (4, "AIG", ["finance"]),
        ]:
            path = tmp_path / f"page_{page}.pdf"
            path.write_text(f"{client} launch story. " * 20, encoding="utf-8")
            indexer.ingest_file(
                path,
                overrides=DocumentOverrides(
                    title=f"{client}: Launch",
                    slug=f"{client.lower().replace(' ', '-')}-launch",
                    client_name=client,
                    capability_slugs=["brand-strategy"],
                    industry_slugs=industries,
                    topic_slugs=["case-study"],
                ),
            )
        return sb

    def test_filtered_query(self, sb):
        context = ContextRetriever(sb, embed=fake_embed).retrieve(
            "brand launch for a tech company",
            capability_slugs=["brand-strategy"],
            industry_slugs=["technology"],
        )

        assert context.chunks
        assert {c["client_name"] for c in context.chunks} == {"Renew Home"}

    def test_unfiltered_query_sees_everything(self, sb):
        context = ContextRetriever(sb, embed=fake_embed).retrieve("launch")

        assert {c["client_name"] for c in context.chunks} == {"Renew Home", "AIG"}
        assert context.visual_assets == []
        assert [name for name, _ in sb.rpc_calls] == ["hybrid_search", "search_visual_assets"]
