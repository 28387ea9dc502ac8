"""In-memory Supabase client covering the query-builder, RPC and storage calls the repo makes."""

import re
from types import SimpleNamespace
from typing import Any, Callable
from uuid import uuid4

UNIQUE_COLUMNS = {"documents": ("slug",), "topics": ("slug",)}


class FakeAPIError(Exception):
    """Stands in for postgrest's APIError on constraint violations."""


class _Query:
    def __init__(self, db: "FakeSupabase", table: str):
        self.db = db
        self.table = table
        self.op = "select"
        self.columns: list[str] | None = None
        self.payload: Any = None
        self.filters: list[Callable[[dict], bool]] = []
        self.row_limit: int | None = None
        self.ordering: tuple[str, bool] | None = None

    def select(self, columns: str = "*"):
        self.op = "select"
        if columns.strip() != "*":
            self.columns = [c.strip() for c in columns.split(",")]
        return self

    def insert(self, payload):
        self.op = "insert"
        self.payload = payload
        return self

    def update(self, payload):
        self.op = "update"
        self.payload = payload
        return self

    def eq(self, column, value):
        self.filters.append(lambda row: row.get(column) == value)
        return self

    def in_(self, column, values):
        values = list(values)
        self.filters.append(lambda row: row.get(column) in values)
        return self

    def ilike(self, column, pattern):
        regex = re.compile(
            "".join(".*" if c == "%" else "." if c == "_" else re.escape(c) for c in pattern),
            re.IGNORECASE,
        )
        self.filters.append(lambda row: row.get(column) is not None and bool(regex.fullmatch(row[column])))
        return self

    def order(self, column, desc=False):
        self.ordering = (column, desc)
        return self

    def limit(self, count):
        self.row_limit = count
        return self

    def _matching(self) -> list[dict]:
        rows = self.db.tables.setdefault(self.table, [])
        return [row for row in rows if all(f(row) for f in self.filters)]

    def execute(self):
        self.db.executed.append((self.table, self.op))
        if self.op == "insert":
            return SimpleNamespace(data=self._insert())
        if self.op == "update":
            matched = self._matching()
            for row in matched:
                row.update(self.payload)
            return SimpleNamespace(data=[dict(row) for row in matched])

        rows = self._matching()
        if self.ordering is not None:
            column, desc = self.ordering
            rows = sorted(rows, key=lambda row: row.get(column), reverse=desc)
        if self.row_limit is not None:
            rows = rows[: self.row_limit]
        if self.columns:
            rows = [{c: row.get(c) for c in self.columns} for row in rows]
        else:
            rows = [dict(row) for row in rows]
        return SimpleNamespace(data=rows)

    def _insert(self) -> list[dict]:
        if self.table in self.db.fail_inserts:
            raise FakeAPIError(f"insert into {self.table} failed")
        records = self.payload if isinstance(self.payload, list) else [self.payload]
        rows = self.db.tables.setdefault(self.table, [])
        created = []
        for record in records:
            for column in UNIQUE_COLUMNS.get(self.table, ()):
                if any(row.get(column) == record.get(column) for row in rows):
                    raise FakeAPIError(
                        f'duplicate key value violates unique constraint "{self.table}_{column}_key"'
                    )
            row = {"id": str(uuid4()), **record}
            rows.append(row)
            created.append(dict(row))
        return created


class _Bucket:
    def __init__(self, storage: "_Storage", name: str):
        self.storage = storage
        self.name = name

    def upload(self, path, file, file_options=None):
        if self.name not in self.storage.buckets:
            raise FakeAPIError(f"Bucket not found: {self.name}")
        if path in self.storage.fail_uploads:
            raise FakeAPIError(f"upload of {path} failed")
        self.storage.objects[(self.name, path)] = (file, file_options or {})
        return SimpleNamespace(path=path)

    def get_public_url(self, path):
        return f"{self.storage.base_url}/storage/v1/object/public/{self.name}/{path}"

    def create_signed_url(self, path, expires_in):
        if (self.name, path) not in self.storage.objects and not self.storage.sign_missing:
            raise FakeAPIError(f"Object not found: {path}")
        return {
            "signedURL": (
                f"{self.storage.base_url}/storage/v1/object/sign/{self.name}/{path}"
                f"?token=fake&expires_in={expires_in}"
            )
        }


class _Storage:
    def __init__(self, base_url: str):
        self.base_url = base_url
        self.buckets: dict[str, dict] = {}
        self.objects: dict[tuple[str, str], tuple[bytes, dict]] = {}
        self.fail_uploads: set[str] = set()
        self.sign_missing = True

    def list_buckets(self):
        return [SimpleNamespace(name=name, id=name) for name in self.buckets]

    def create_bucket(self, id, options=None):
        if id in self.buckets:
            raise FakeAPIError(f"Bucket {id} already exists")
        self.buckets[id] = dict(options or {})
        return SimpleNamespace(name=id)

    def from_(self, bucket):
        return _Bucket(self, bucket)


class _RPC:
    def __init__(self, db: "FakeSupabase", name: str, params: dict):
        self.db = db
        self.name = name
        self.params = params

    def execute(self):
        self.db.rpc_calls.append((self.name, self.params))
        handler = self.db.rpc_handlers.get(self.name)
        if handler is None:
            raise FakeAPIError(f"function {self.name} does not exist")
        return SimpleNamespace(data=handler(self.db, self.params))


class FakeSupabase:
    """Minimal Supabase client over dict tables.

    RPCs are registered as handlers receiving (db, params) and returning rows.
    """

    def __init__(self, base_url: str = "https://test.supabase.co"):
        self.tables: dict[str, list[dict]] = {}
        self.rpc_handlers: dict[str, Callable[["FakeSupabase", dict], list[dict]]] = {}
        self.rpc_calls: list[tuple[str, dict]] = []
        self.executed: list[tuple[str, str]] = []
        self.fail_inserts: set[str] = set()
        self.storage = _Storage(base_url)

    def table(self, name: str) -> _Query:
        return _Query(self, name)

    def rpc(self, name: str, params: dict) -> _RPC:
        return _RPC(self, name, params)


def hybrid_search_handler(db: FakeSupabase, params: dict) -> list[dict]:
    """Chunks joined with their documents, filtered by tag overlap like the SQL function."""
    documents = {d["id"]: d for d in db.tables.get("documents", [])}
    capabilities = set(params.get("capability_slugs") or [])
    industries = set(params.get("industry_slugs") or [])

    rows = []
    for chunk in db.tables.get("content_chunks", []):
        doc = documents.get(chunk["document_id"])
        if doc is None:
            continue
        if capabilities and not capabilities & set(doc.get("capability_slugs") or []):
            continue
        if industries and not industries & set(doc.get("industry_slugs") or []):
            continue
        rows.append(
            {
                "chunk_id": chunk["id"],
                "document_id": doc["id"],
                "content": chunk["content"],
                "chunk_type": chunk.get("chunk_type", "text"),
                "metadata": chunk.get("metadata", {}),
                "document_title": doc["title"],
                "document_type": doc["doc_type"],
                "slug": doc["slug"],
                "client_name": doc.get("client_name"),
                "pdf_url": doc.get("pdf_url"),
                "combined_score": 0.5,
            }
        )
    return rows[: params["match_count"]]


def visual_assets_handler(db: FakeSupabase, params: dict) -> list[dict]:
    return list(db.tables.get("visual_assets", []))[: params["match_count"]]
