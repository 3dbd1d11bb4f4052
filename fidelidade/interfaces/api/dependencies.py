# fidelidade/interfaces/api/dependencies.py
from __future__ import annotations

from collections.abc import Generator

import duckdb
from fastapi import Depends, Header

from fidelidade.application.services.beneficiario_service import BeneficiarioService
from fidelidade.application.services.perfil_service import PerfilService
from fidelidade.application.services.reconciliacao_service import ReconciliacaoService
from fidelidade.application.services.substituicao_service import SubstituicaoService
from fidelidade.application.services.vagas_service import VagasService
from fidelidade.infrastructure.duckdb_connection import get_connection
from fidelidade.infrastructure.repositories.duckdb_beneficiario_repo import DuckDBBeneficiarioRepo
from fidelidade.infrastructure.repositories.duckdb_perfil_repo import DuckDBPerfilRepo


def get_cursor() -> Generator[duckdb.DuckDBPyConnection, None, None]:
    """Um cursor por request: transacoes de requests concorrentes nao se misturam."""
    cursor = get_connection().cursor()
    try:
        yield cursor
    finally:
        cursor.close()


def get_usuario_id(x_usuario_id: str = Header(..., min_length=1)) -> str:
    """Identidade ja autenticada pela borda; sessao/autenticacao fora do escopo."""
    return x_usuario_id


def get_perfil_service(
    conn: duckdb.DuckDBPyConnection = Depends(get_cursor),  # noqa: B008
) -> PerfilService:
    return PerfilService(
        perfil_repo=DuckDBPerfilRepo(conn),
        beneficiario_repo=DuckDBBeneficiarioRepo(conn),
    )


def _montar(conn: duckdb.DuckDBPyConnection) -> tuple[DuckDBBeneficiarioRepo, DuckDBPerfilRepo, PerfilService, SubstituicaoService, ReconciliacaoService]:
    beneficiario_repo = DuckDBBeneficiarioRepo(conn)
    perfil_repo = DuckDBPerfilRepo(conn)
    perfis = PerfilService(perfil_repo=perfil_repo, beneficiario_repo=beneficiario_repo)
    substituicao = SubstituicaoService(beneficiario_repo)
    reconciliacao = ReconciliacaoService(beneficiario_repo, substituicao)
    return beneficiario_repo, perfil_repo, perfis, substituicao, reconciliacao


def get_beneficiario_service(
    conn: duckdb.DuckDBPyConnection = Depends(get_cursor),  # noqa: B008
) -> BeneficiarioService:
    beneficiario_repo, _, perfis, substituicao, reconciliacao = _montar(conn)
    return BeneficiarioService(
        beneficiario_repo=beneficiario_repo,
        perfis=perfis,
        substituicao=substituicao,
        reconciliacao=reconciliacao,
    )


def get_vagas_service(
    conn: duckdb.DuckDBPyConnection = Depends(get_cursor),  # noqa: B008
) -> VagasService:
    beneficiario_repo, perfil_repo, perfis, _, reconciliacao = _montar(conn)
    return VagasService(
        beneficiario_repo=beneficiario_repo,
        perfil_repo=perfil_repo,
        perfis=perfis,
        reconciliacao=reconciliacao,
    )
