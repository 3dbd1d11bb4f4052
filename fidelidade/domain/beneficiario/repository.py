# fidelidade/domain/beneficiario/repository.py
from __future__ import annotations

from contextlib import AbstractContextManager
from datetime import date
from typing import Protocol

from .entities import Beneficiario
from .enums import Programa
from .value_objects import CPF


class BeneficiarioRepository(Protocol):
    def transacao(self) -> AbstractContextManager[None]: ...
    def buscar_por_id(self, beneficiario_id: str) -> Beneficiario | None: ...
    def listar_por_perfil(self, perfil_id: str, programa: Programa | None = None) -> list[Beneficiario]: ...
    def listar_pendentes_azul(self, perfil_id: str | None = None) -> list[Beneficiario]: ...
    def buscar_par(self, beneficiario: Beneficiario) -> Beneficiario | None: ...

    def existe_cpf(
        self,
        perfil_id: str,
        programa: Programa,
        cpf: CPF,
        excluir_id: str | None = None,
    ) -> bool: ...

    def contar_por_periodo(self, perfil_id: str, programa: Programa, inicio: date, fim: date) -> int: ...
    def criar(self, beneficiario: Beneficiario) -> Beneficiario: ...
    def atualizar(self, beneficiario: Beneficiario) -> Beneficiario: ...
    def excluir(self, beneficiario_id: str) -> None: ...
    def excluir_por_programa(self, perfil_id: str, programa: Programa) -> int: ...
    def excluir_por_perfil(self, perfil_id: str) -> int: ...
