# tests/integration/conftest.py
from __future__ import annotations

from collections.abc import Generator

import duckdb
import pytest
from fastapi.testclient import TestClient

USUARIO = "usuario-1"


@pytest.fixture
def client() -> Generator[TestClient, None, None]:
    """TestClient do FastAPI com DuckDB in-memory novo por teste."""
    from fidelidade.infrastructure import duckdb_connection
    from fidelidade.infrastructure.config import get_settings

    get_settings.cache_clear()
    conn = duckdb.connect(":memory:")
    duckdb_connection.criar_schema(conn)
    duckdb_connection.set_connection(conn)

    from fidelidade.interfaces.api.main import app

    with TestClient(app, headers={"X-Usuario-Id": USUARIO}) as c:
        yield c
    conn.close()


@pytest.fixture
def perfil_id(client: TestClient) -> str:
    response = client.post("/api/perfis", json={"nome": "Titular Teste", "cpf": "529.982.247-25"})
    assert response.status_code == 201
    return str(response.json()["id"])
