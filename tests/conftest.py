"""Pytest configuration and fixtures."""

import os

import pytest

from tests.fakes.fake_db import FakeDocumentStore, FakeStorage, fake_embed


@pytest.fixture(scope="session", autouse=True)
def setup_test_env():
    """Set up test environment variables."""
    os.environ["SUPABASE_URL"] = "https://test.supabase.co"
    os.environ["SUPABASE_SERVICE_ROLE_KEY"] = "test-key"
    os.environ["OPENAI_API_KEY"] = "test-openai-key"
    os.environ["ANTHROPIC_API_KEY"] = "test-anthropic-key"
    os.environ["CONCIERGE_ENV"] = "test"


@pytest.fixture
def store():
    """Empty in-memory document store."""
    return FakeDocumentStore()


@pytest.fixture
def storage():
    """Empty in-memory PDF bucket."""
    return FakeStorage("case-study-pdfs")


@pytest.fixture
def embed():
    return fake_embed
