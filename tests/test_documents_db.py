"""Tests for DocumentStore and PdfStorage against the in-memory Supabase client."""

import pytest

from concierge.core.errors import StorageError
from concierge.db.documents import DocumentStore
from concierge.db.storage import PdfStorage, create_signed_url
from tests.fakes.fake_supabase import FakeSupabase


@pytest.fixture
def sb():
    return FakeSupabase()


@pytest.fixture
def db(sb):
    return DocumentStore(sb)


class TestDocuments:
    def test_create_and_get_by_slug(self, db):
        created = db.create_document({"title": "A", "slug": "a", "doc_type": "article"})

        assert created["id"]
        assert db.get_by_slug("a")["id"] == created["id"]
        assert db.get_by_slug("a", doc_type="case_study") is None
        assert db.get_by_slug("missing") is None

    def test_duplicate_slug_raises(self, db):
        db.create_document({"title": "A", "slug": "a", "doc_type": "article"})

        with pytest.raises(Exception, match="duplicate key"):
            db.create_document({"title": "A again", "slug": "a", "doc_type": "article"})

    def test_list_case_studies_and_set_pdf_url(self, db):
        db.create_document({"title": "Article", "slug": "article", "doc_type": "article"})
        cs = db.create_document(
            {"title": "AWS: Demo", "slug": "aws-demo", "doc_type": "case_study", "client_name": "AWS"}
        )

        case_studies = db.list_case_studies()
        assert [c["slug"] for c in case_studies] == ["aws-demo"]
        assert set(case_studies[0]) == {"id", "title", "slug", "client_name", "pdf_url"}

        db.set_pdf_url(cs["id"], "https://x/aws.pdf")
        assert db.get_by_slug("aws-demo")["pdf_url"] == "https://x/aws.pdf"

    def test_get_document_tags(self, db):
        a = db.create_document(
            {
                "title": "A",
                "slug": "a",
                "doc_type": "case_study",
                "capability_slugs": ["brand-strategy"],
                "industry_slugs": ["technology"],
            }
        )
        b = db.create_document({"title": "B", "slug": "b", "doc_type": "article"})

        tags = db.get_document_tags([a["id"], b["id"]])

        assert tags[a["id"]] == {"capability_slugs": ["brand-strategy"], "industry_slugs": ["technology"]}
        assert tags[b["id"]] == {"capability_slugs": [], "industry_slugs": []}
        assert db.get_document_tags([]) == {}


class TestTopics:
    def test_ensure_topics_creates_once(self, db, sb):
        first = db.ensure_topics(["ai", "marketing", "ai"])
        second = db.ensure_topics(["marketing", "brand-voice"])

        assert list(first) == ["ai", "marketing"]
        assert second["marketing"] == first["marketing"]
        names = {t["slug"]: t["name"] for t in sb.tables["topics"]}
        assert names == {"ai": "AI & Technology", "marketing": "Marketing", "brand-voice": "Brand Voice"}

    def test_topic_insert_failure_is_skipped(self, db, sb):
        sb.fail_inserts.add("topics")

        assert db.ensure_topics(["ai"]) == {}

    def test_link_topics(self, db, sb):
        doc = db.create_document({"title": "A", "slug": "a", "doc_type": "article"})
        topic_ids = db.ensure_topics(["ai", "creative"])

        assert db.link_topics(doc["id"], list(topic_ids.values())) == 2
        assert len(sb.tables["document_topics"]) == 2

    def test_link_failure_counted(self, db, sb):
        sb.fail_inserts.add("document_topics")
        assert db.link_topics("doc", ["t1", "t2"]) == 0


def test_insert_chunk(db, sb):
    db.insert_chunk("doc-1", 3, "content", [0.1] * 1536, {"source": "article", "char_count": 7})

    row = sb.tables["content_chunks"][0]
    assert row["chunk_type"] == "text"
    assert row["chunk_index"] == 3
    assert row["metadata"] == {"source": "article", "char_count": 7}


class TestPdfStorage:
    def test_ensure_bucket_creates_once(self, sb):
        storage = PdfStorage(sb, "case-study-pdfs")

        assert storage.ensure_bucket() is True
        assert storage.ensure_bucket() is False
        assert sb.storage.buckets["case-study-pdfs"] == {
            "public": True,
            "file_size_limit": 50 * 1024 * 1024,
            "allowed_mime_types": ["application/pdf"],
        }

    def test_upload_returns_public_url(self, sb):
        storage = PdfStorage(sb, "article-pdfs")
        storage.ensure_bucket()

        url = storage.upload_pdf("brand-guide.pdf", b"%PDF")

        assert url == "https://test.supabase.co/storage/v1/object/public/article-pdfs/brand-guide.pdf"
        data, options = sb.storage.objects[("article-pdfs", "brand-guide.pdf")]
        assert data == b"%PDF"
        assert options == {"content-type": "application/pdf", "upsert": "true"}

    def test_upload_failure_raises_storage_error(self, sb):
        storage = PdfStorage(sb, "missing-bucket")

        with pytest.raises(StorageError):
            storage.upload_pdf("x.pdf", b"%PDF")


class TestSignedUrl:
    def test_signed_url(self, sb):
        url = create_signed_url(sb, "assets", "a/b.png", expires_in=3600)

        assert "/object/sign/assets/a/b.png" in url
        assert "expires_in=3600" in url

    def test_signing_failure_returns_none(self, sb):
        sb.storage.sign_missing = False

        assert create_signed_url(sb, "assets", "nope.png") is None


class TestDocumentBySlug:
    @pytest.fixture
    def db(self, sb):
        db = DocumentStore(sb)
        db.create_document({"title": "Google: Think Week", "slug": "google-think-week", "doc_type": "case_study"})
        db.create_document({"title": "Google Ads", "slug": "google-ads-playbook", "doc_type": "article"})
        return db

    def test_exact_then_prefix(self, db):
        assert db.get_document_by_slug("google-think-week")["title"] == "Google: Think Week"
        assert db.get_document_by_slug("google-think")["slug"] == "google-think-week"
        assert db.get_document_by_slug("GOOGLE-ADS")["slug"] == "google-ads-playbook"

    def test_doc_type_applies_to_every_step(self, db):
        assert db.get_document_by_slug("google-ads", doc_type="case_study") is None
        assert db.get_document_by_slug("google-think", doc_type="article") is None

    def test_short_words_are_not_searched(self, db):
        # Only one word longer than two characters, so no word search
        assert db.get_document_by_slug("go-to-google") is None

    def test_chunks_in_reading_order(self, db, sb):
        doc = db.get_by_slug("google-think-week")
        for index in (2, 0, 1):
            db.insert_chunk(doc["id"], index, f"part {index}", [0.0] * 1536)

        assert [c["content"] for c in db.list_chunks(doc["id"])] == ["part 0", "part 1", "part 2"]
