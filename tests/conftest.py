# tests/conftest.py
from __future__ import annotations

from collections.abc import Callable, Generator
from datetime import datetime, timedelta

import duckdb
import pytest

from fidelidade.application.services.beneficiario_service import BeneficiarioService
from fidelidade.application.services.perfil_service import PerfilService
from fidelidade.application.services.reconciliacao_service import ReconciliacaoService
from fidelidade.application.services.substituicao_service import SubstituicaoService
from fidelidade.application.services.vagas_service import VagasService
from fidelidade.domain.calendario import FUSO_BRASIL
from fidelidade.infrastructure.duckdb_connection import criar_schema
from fidelidade.infrastructure.repositories.duckdb_beneficiario_repo import DuckDBBeneficiarioRepo
from fidelidade.infrastructure.repositories.duckdb_perfil_repo import DuckDBPerfilRepo

AGORA = datetime(2025, 3, 1, 10, 0, tzinfo=FUSO_BRASIL)
USUARIO = "usuario-1"
CPF_PERFIL = "52998224725"


class RelogioFixo:
    """Relogio controlavel: os servicos chamam relogio() para saber 'agora'."""

    def __init__(self, agora: datetime) -> None:
        self.agora = agora

    def __call__(self) -> datetime:
        return self.agora

    def avancar(self, dias: int) -> None:
        self.agora += timedelta(days=dias)


def cpf_valido(base: int) -> str:
    """CPF com digitos verificadores corretos a partir de uma base de 9 digitos."""
    digitos = [int(c) for c in f"{base:09d}"]
    for pesos in (range(10, 1, -1), range(11, 1, -1)):
        resto = sum(d * p for d, p in zip(digitos, pesos)) % 11
        digitos.append(0 if resto < 2 else 11 - resto)
    return "".join(str(d) for d in digitos)


@pytest.fixture
def gerar_cpf() -> Callable[[int], str]:
    """gerar_cpf(n) -> CPF valido e distinto para cada n."""
    return lambda n: cpf_valido(123456000 + n)


@pytest.fixture
def conn() -> Generator[duckdb.DuckDBPyConnection, None, None]:
    conn = duckdb.connect(":memory:")
    criar_schema(conn)
    yield conn
    conn.close()


@pytest.fixture
def relogio() -> RelogioFixo:
    return RelogioFixo(AGORA)


@pytest.fixture
def beneficiario_repo(conn: duckdb.DuckDBPyConnection) -> DuckDBBeneficiarioRepo:
    return DuckDBBeneficiarioRepo(conn)


@pytest.fixture
def perfil_repo(conn: duckdb.DuckDBPyConnection) -> DuckDBPerfilRepo:
    return DuckDBPerfilRepo(conn)


@pytest.fixture
def perfil_service(
    perfil_repo: DuckDBPerfilRepo,
    beneficiario_repo: DuckDBBeneficiarioRepo,
    relogio: RelogioFixo,
) -> PerfilService:
    return PerfilService(perfil_repo, beneficiario_repo, relogio)


@pytest.fixture
def substituicao_service(beneficiario_repo: DuckDBBeneficiarioRepo, relogio: RelogioFixo) -> SubstituicaoService:
    return SubstituicaoService(beneficiario_repo, relogio)


@pytest.fixture
def reconciliacao_service(
    beneficiario_repo: DuckDBBeneficiarioRepo,
    substituicao_service: SubstituicaoService,
    relogio: RelogioFixo,
) -> ReconciliacaoService:
    return ReconciliacaoService(beneficiario_repo, substituicao_service, relogio)


@pytest.fixture
def beneficiario_service(
    beneficiario_repo: DuckDBBeneficiarioRepo,
    perfil_service: PerfilService,
    substituicao_service: SubstituicaoService,
    reconciliacao_service: ReconciliacaoService,
    relogio: RelogioFixo,
) -> BeneficiarioService:
    return BeneficiarioService(
        beneficiario_repo,
        perfil_service,
        substituicao_service,
        reconciliacao_service,
        relogio,
    )


@pytest.fixture
def vagas_service(
    beneficiario_repo: DuckDBBeneficiarioRepo,
    perfil_repo: DuckDBPerfilRepo,
    perfil_service: PerfilService,
    reconciliacao_service: ReconciliacaoService,
    relogio: RelogioFixo,
) -> VagasService:
    return VagasService(beneficiario_repo, perfil_repo, perfil_service, reconciliacao_service, relogio)


@pytest.fixture
def perfil_id(perfil_service: PerfilService) -> str:
    return perfil_service.criar(USUARIO, "Titular Teste", CPF_PERFIL).id
