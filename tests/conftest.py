import os

# Set env vars BEFORE any imports from the project happen
os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_KEY", "test-anon-key")
os.environ.setdefault("ADMIN_TOKEN", "test-admin-token")
os.environ["S3_BUCKET_NAME"] = ""

import re
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from sportsme.main import app
from sportsme.database.supabase_client import get_supabase, get_service_supabase
from sportsme.modules.auth.service import clear_auth_cache

ADMIN_TOKEN = os.environ["ADMIN_TOKEN"]

UNIQUE_KEYS = {
    "groups": [("code",)],
    "group_memberships": [("user_id", "group_id")],
    "poll_votes": [("post_id", "user_id")],
}

# ON DELETE CASCADE foreign keys enforced by the store
CASCADES = {
    "groups": [("posts", "group_id"), ("group_memberships", "group_id")],
    "posts": [
        ("comments", "post_id"),
        ("file_attachments", "post_id"),
        ("poll_options", "post_id"),
        ("poll_votes", "post_id"),
    ],
}

EMBED_PATTERN = re.compile(r"(\w+)\s*\(([^)]*)\)")
BASE_TIME = datetime(2026, 1, 1, tzinfo=timezone.utc)


class FakeAPIError(Exception):
    def __init__(self, message):
        super().__init__(message)
        self.message = message


class FakeResponse:
    def __init__(self, data):
        self.data = data


class FakeQuery:
    """Just enough of the postgrest query builder for the services under test"""

    def __init__(self, db, table):
        self.db = db
        self.table_name = table
        self.op = "select"
        self.columns = "*"
        self.payload = None
        self.filters = []
        self.order_by = None
        self.limit_n = None
        self.on_conflict = ""
        self.ignore_duplicates = False

    def select(self, columns="*"):
        self.op = "select"
        self.columns = columns
        return self

    def insert(self, payload):
        self.op = "insert"
        self.payload = payload
        return self

    def upsert(self, payload, on_conflict="", ignore_duplicates=False):
        self.op = "upsert"
        self.payload = payload
        self.on_conflict = on_conflict
        self.ignore_duplicates = ignore_duplicates
        return self

    def delete(self):
        self.op = "delete"
        return self

    def eq(self, column, value):
        self.filters.append(("eq", column, value))
        return self

    def in_(self, column, values):
        self.filters.append(("in", column, list(values)))
        return self

    def order(self, column, desc=False):
        self.order_by = (column, desc)
        return self

    def limit(self, n):
        self.limit_n = n
        return self

    def _matches(self, row):
        for kind, column, value in self.filters:
            if kind == "eq" and row.get(column) != value:
                return False
            if kind == "in" and row.get(column) not in value:
                return False
        return True

    def execute(self):
        self.db.log.append((self.table_name, self.op, tuple(self.filters)))
        failure = self.db.failures.get((self.table_name, self.op))
        if failure is not None:
            raise failure
        return FakeResponse(getattr(self, f"_execute_{self.op}")())

    def _execute_select(self):
        rows = [dict(r) for r in self.db.rows(self.table_name) if self._matches(r)]
        if self.order_by:
            column, desc = self.order_by
            rows.sort(key=lambda r: r.get(column), reverse=desc)
        if self.limit_n is not None:
            rows = rows[:self.limit_n]
        for name, _ in EMBED_PATTERN.findall(self.columns):
            fk = f"{name[:-1]}_id"
            for row in rows:
                related = [r for r in self.db.rows(name) if r["id"] == row.get(fk)]
                row[name] = dict(related[0]) if related else None
        return rows

    def _execute_insert(self):
        payload = self.payload if isinstance(self.payload, list) else [self.payload]
        for item in payload:
            self.db.check_unique(self.table_name, item)
        return [dict(self.db.add_row(self.table_name, item)) for item in payload]

    def _execute_upsert(self):
        keys = [k.strip() for k in self.on_conflict.split(",") if k.strip()]
        payload = self.payload if isinstance(self.payload, list) else [self.payload]
        written = []
        for item in payload:
            existing = [
                r for r in self.db.rows(self.table_name)
                if keys and all(r.get(k) == item.get(k) for k in keys)
            ]
            if existing:
                if not self.ignore_duplicates:
                    existing[0].update(item)
                    written.append(dict(existing[0]))
                continue
            self.db.check_unique(self.table_name, item)
            written.append(dict(self.db.add_row(self.table_name, item)))
        return written

    def _execute_delete(self):
        deleted = [r for r in self.db.rows(self.table_name) if self._matches(r)]
        self.db.remove_rows(self.table_name, deleted)
        return [dict(r) for r in deleted]


class FakeBucket:
    def __init__(self, db, name):
        self.db = db
        self.name = name

    def upload(self, path, content, file_options=None):
        for fragment in self.db.failing_uploads:
            if fragment in path:
                raise FakeAPIError(f"upload rejected: {path}")
        self.db.objects[(self.name, path)] = content
        return SimpleNamespace(path=path, full_path=f"{self.name}/{path}")

    def get_public_url(self, path):
        return f"https://test-project.supabase.co/storage/v1/object/public/{self.name}/{path}"


class FakeStorage:
    def __init__(self, db):
        self.db = db

    def from_(self, bucket):
        return FakeBucket(self.db, bucket)


class FakeAuthAdmin:
    def __init__(self, auth):
        self.auth = auth
        self.failing_deletes = set()

    def list_users(self, page=None, per_page=None):
        self.auth.db.log.append(("auth.users", "list_users", (page, per_page)))
        return list(self.auth.users.values())

    def delete_user(self, user_id, should_soft_delete=False):
        self.auth.db.log.append(("auth.users", "delete_user", (user_id,)))
        if user_id in self.failing_deletes:
            raise FakeAPIError(f"Database error deleting user {user_id}")
        self.auth.users.pop(user_id, None)

    def sign_out(self, jwt, scope="global"):
        self.auth.tokens.pop(jwt, None)


class FakeAuth:
    def __init__(self, db):
        self.db = db
        self.users = {}
        self.tokens = {}
        self.passwords = {}
        self.sign_up_calls = []
        self.admin = FakeAuthAdmin(self)

    def add_user(self, user_id, email, full_name=None, token=None, password="secret"):
        metadata = {"full_name": full_name} if full_name else {}
        self.users[user_id] = SimpleNamespace(id=user_id, email=email, user_metadata=metadata)
        self.passwords[email] = (password, user_id)
        self.tokens[token or f"token-{user_id}"] = user_id
        return self.users[user_id]

    def get_user(self, jwt=None):
        if jwt not in self.tokens:
            raise FakeAPIError("invalid JWT: unable to parse or verify signature")
        return SimpleNamespace(user=self.users[self.tokens[jwt]])

    def sign_up(self, credentials):
        self.sign_up_calls.append(credentials)
        if credentials["email"] in self.passwords:
            raise FakeAPIError("User already registered")
        user_id = f"user-{len(self.users) + 1}"
        user = self.add_user(
            user_id,
            credentials["email"],
            credentials["options"]["data"].get("full_name"),
            password=credentials["password"],
        )
        return SimpleNamespace(user=user, session=None)

    def sign_in_with_password(self, credentials):
        password, user_id = self.passwords.get(credentials["email"], (None, None))
        if password is None or password != credentials["password"]:
            raise FakeAPIError("Invalid login credentials")
        token = f"token-{user_id}"
        self.tokens[token] = user_id
        return SimpleNamespace(user=self.users[user_id], session=SimpleNamespace(access_token=token))

    def sign_out(self):
        return None


class FakeSupabase:
    """In-memory stand-in for the Supabase client: tables, auth and storage"""

    def __init__(self):
        self.tables = {}
        self.sequences = {}
        self.clock = 0
        self.log = []
        self.failures = {}
        self.failing_uploads = set()
        self.objects = {}
        self.auth = FakeAuth(self)
        self.storage = FakeStorage(self)

    def table(self, name):
        return FakeQuery(self, name)

    def rows(self, name):
        return self.tables.setdefault(name, [])

    def fail(self, table, op, error=None):
        self.failures[(table, op)] = error or FakeAPIError(f"{op} on {table} failed")

    def check_unique(self, table, item):
        for columns in UNIQUE_KEYS.get(table, []):
            for row in self.rows(table):
                if all(row.get(c) == item.get(c) for c in columns):
                    raise FakeAPIError(f"duplicate key value violates unique constraint on {table}")

    def add_row(self, table, item):
        self.sequences[table] = self.sequences.get(table, 0) + 1
        self.clock += 1
        row = {"id": self.sequences[table], "created_at": (BASE_TIME + timedelta(seconds=self.clock)).isoformat()}
        row.update(item)
        self.rows(table).append(row)
        return row

    def remove_rows(self, table, rows):
        ids = {id(r) for r in rows}
        self.tables[table] = [r for r in self.rows(table) if id(r) not in ids]
        for child, fk in CASCADES.get(table, []):
            parent_ids = [r["id"] for r in rows]
            self.remove_rows(child, [r for r in self.rows(child) if r.get(fk) in parent_ids])

    def deletes(self):
        return [(table, filters) for table, op, filters in self.log if op == "delete"]


@pytest.fixture
def fake_supabase():
    return FakeSupabase()


@pytest.fixture
def client(fake_supabase):
    clear_auth_cache()
    app.dependency_overrides[get_supabase] = lambda: fake_supabase
    app.dependency_overrides[get_service_supabase] = lambda: fake_supabase
    yield TestClient(app, raise_server_exceptions=False)
    app.dependency_overrides.clear()
    clear_auth_cache()


@pytest.fixture
def alice(fake_supabase):
    fake_supabase.auth.add_user("alice-id", "alice@example.com", "Alice", token="alice-token")
    return {"Authorization": "Bearer alice-token"}


@pytest.fixture
def bob(fake_supabase):
    fake_supabase.auth.add_user("bob-id", "bob@example.com", "Bob", token="bob-token")
    return {"Authorization": "Bearer bob-token"}


@pytest.fixture
def admin_headers():
    return {"x-admin-token": ADMIN_TOKEN}
