"""Fixtures and helpers for integration tests against a real PostgreSQL."""

from __future__ import annotations

import os
import re
import shutil
import subprocess
from typing import Any

import pytest

from pyconnfilter import Result


# ---------------------------------------------------------------------------
# Container runtime detection (Docker or Podman)
# ---------------------------------------------------------------------------

def _get_podman_socket() -> str | None:
    """Get the Podman machine socket path, if available."""
    try:
        result = subprocess.run(
            ["podman", "machine", "inspect", "--format",
             "{{.ConnectionInfo.PodmanSocket.Path}}"],
            capture_output=True, text=True, check=True, timeout=5,
        )
        sock = result.stdout.strip()
        if sock and os.path.exists(sock):
            return sock
    except (subprocess.CalledProcessError, subprocess.TimeoutExpired,
            FileNotFoundError):
        pass
    return None


def _container_runtime_available() -> bool:
    for cmd in ["docker", "podman"]:
        if shutil.which(cmd):
            try:
                subprocess.run(
                    [cmd, "info"], capture_output=True, check=True, timeout=10,
                )
                return True
            except (subprocess.CalledProcessError, subprocess.TimeoutExpired,
                    FileNotFoundError):
                continue
    return False


def _configure_testcontainers_for_podman() -> None:
    if not shutil.which("podman"):
        return
    os.environ.setdefault("TESTCONTAINERS_RYUK_DISABLED", "true")
    if "DOCKER_HOST" not in os.environ:
        sock = _get_podman_socket()
        if sock:
            os.environ["DOCKER_HOST"] = f"unix://{sock}"


CONTAINER_RUNTIME_AVAILABLE = _container_runtime_available()

if CONTAINER_RUNTIME_AVAILABLE:
    _configure_testcontainers_for_podman()


# ---------------------------------------------------------------------------
# Schema and seed data
# ---------------------------------------------------------------------------

SCHEMA_DDL = [
    "CREATE SCHEMA IF NOT EXISTS app_public",
    """
    CREATE TABLE app_public.post (
        id SERIAL PRIMARY KEY,
        first_name TEXT NOT NULL,
        last_name TEXT NOT NULL,
        score INTEGER NOT NULL,
        tags TEXT[] NOT NULL DEFAULT '{}'
    )
    """,
    """
    CREATE FUNCTION app_public.post_full_name(p app_public.post) RETURNS text
    LANGUAGE sql STABLE AS $$ SELECT p.first_name || ' ' || p.last_name $$
    """,
    """
    CREATE FUNCTION app_public.post_score_plus(p app_public.post, extra integer) RETURNS integer
    LANGUAGE sql STABLE AS $$ SELECT p.score + extra $$
    """,
    "COMMENT ON FUNCTION app_public.post_score_plus(app_public.post, integer) IS "
    "E'@fieldName boostedScore\\nScore plus a bonus.'",
    """
    CREATE FUNCTION app_public.post_between(p app_public.post, low integer, high integer)
    RETURNS boolean
    LANGUAGE sql STABLE AS $$ SELECT p.score BETWEEN low AND high $$
    """,
    """
    CREATE FUNCTION app_public.post_tag_list(p app_public.post) RETURNS text[]
    LANGUAGE sql STABLE AS $$ SELECT p.tags $$
    """,
    """
    CREATE FUNCTION app_public.post_random(p app_public.post) RETURNS double precision
    LANGUAGE sql VOLATILE AS $$ SELECT random() $$
    """,
    """
    CREATE FUNCTION app_public.post_each_tag(p app_public.post) RETURNS SETOF text
    LANGUAGE sql STABLE AS $$ SELECT unnest(p.tags) $$
    """,
]

SEED_ROWS = [
    ("Jane", "Doe", 10, ["news", "tech"]),
    ("John", "Smith", 5, ["news"]),
    ("Ada", "Lovelace", 42, []),
]


def _setup_postgres(conn) -> None:
    cur = conn.cursor()
    for statement in SCHEMA_DDL:
        cur.execute(statement)
    for row in SEED_ROWS:
        cur.execute(
            "INSERT INTO app_public.post (first_name, last_name, score, tags) "
            "VALUES (%s, %s, %s, %s)",
            row,
        )
    conn.commit()
    cur.close()


# ---------------------------------------------------------------------------
# Session-scoped fixtures
# ---------------------------------------------------------------------------

@pytest.fixture(scope="session")
def pg_container():
    if not CONTAINER_RUNTIME_AVAILABLE:
        pytest.skip("No container runtime (Docker/Podman) available")
    from testcontainers.postgres import PostgresContainer
    with PostgresContainer("postgres:16") as pg:
        yield pg


@pytest.fixture(scope="session")
def pg_db(pg_container):
    import psycopg
    # Build a psycopg3-compatible connection string (not SQLAlchemy URL)
    host = pg_container.get_container_host_ip()
    port = pg_container.get_exposed_port(5432)
    conn = psycopg.connect(
        host=host, port=port,
        user=pg_container.username,
        password=pg_container.password,
        dbname=pg_container.dbname,
    )
    _setup_postgres(conn)
    yield conn
    conn.close()


# ---------------------------------------------------------------------------
# Query execution helpers
# ---------------------------------------------------------------------------

_PLACEHOLDER_RE = re.compile(r"\$(\d+)")


def _adapt_params_for_driver(sql: str, parameters: list[Any]) -> tuple[str, list[Any]]:
    """Rewrite $1, $2, ... as psycopg %s placeholders.

    A placeholder can appear more than once (a computed column call shared
    by several operators), so the value list follows occurrence order.
    """
    ordered: list[Any] = []

    def replace(match: re.Match[str]) -> str:
        ordered.append(parameters[int(match.group(1)) - 1])
        return "%s"

    return _PLACEHOLDER_RE.sub(replace, sql), ordered


def execute_filter(conn, result: Result, alias: str = "post_1") -> set[str]:
    """Run a resolved predicate against app_public.post and return first names."""
    query = f'SELECT "{alias}".first_name FROM app_public.post AS "{alias}" WHERE {result.sql}'
    query, params = _adapt_params_for_driver(query, result.parameters)
    cur = conn.cursor()
    try:
        cur.execute(query, params)
        return {row[0] for row in cur.fetchall()}
    finally:
        cur.close()


@pytest.fixture
def run_filter(pg_db):
    """Return a callable executing a resolved predicate against the seeded table."""
    def _run(result: Result, alias: str = "post_1") -> set[str]:
        return execute_filter(pg_db, result, alias)

    return _run
