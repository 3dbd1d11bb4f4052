# fidelidade/domain/perfil/repository.py
from __future__ import annotations

from typing import Protocol

from fidelidade.domain.beneficiario.value_objects import CPF

from .entities import Perfil


class PerfilRepository(Protocol):
    def buscar_por_id(self, perfil_id: str) -> Perfil | None: ...
    def listar_por_usuario(self, usuario_id: str) -> list[Perfil]: ...
    def existe_cpf(self, usuario_id: str, cpf: CPF) -> bool: ...
    def criar(self, perfil: Perfil) -> Perfil: ...
    def excluir(self, perfil_id: str) -> None: ...
