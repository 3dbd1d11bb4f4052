# fidelidade/application/services/perfil_service.py
from __future__ import annotations

import uuid
from collections.abc import Callable
from datetime import datetime

from fidelidade.domain.beneficiario.repository import BeneficiarioRepository
from fidelidade.domain.beneficiario.value_objects import CPF
from fidelidade.domain.calendario import agora_brasil
from fidelidade.domain.erros import (
    ErroAcessoNegado,
    ErroConflito,
    ErroNaoEncontrado,
    ErroValidacao,
)
from fidelidade.domain.perfil.entities import Perfil
from fidelidade.domain.perfil.repository import PerfilRepository

from ..dtos.perfil_dto import PerfilDTO


class PerfilService:
    def __init__(
        self,
        perfil_repo: PerfilRepository,
        beneficiario_repo: BeneficiarioRepository,
        relogio: Callable[[], datetime] = agora_brasil,
    ) -> None:
        self._perfil_repo = perfil_repo
        self._beneficiario_repo = beneficiario_repo
        self._relogio = relogio

    def garantir_dono(self, perfil_id: str, usuario_id: str | None = None) -> Perfil:
        """Perfil existe e, quando usuario_id e informado, pertence a ele."""
        perfil = self._perfil_repo.buscar_por_id(perfil_id)
        if perfil is None:
            raise ErroNaoEncontrado("Perfil nao encontrado")
        if usuario_id is not None and perfil.usuario_id != usuario_id:
            raise ErroAcessoNegado("Acesso negado")
        return perfil

    def listar(self, usuario_id: str) -> list[PerfilDTO]:
        return [PerfilDTO.from_domain(p) for p in self._perfil_repo.listar_por_usuario(usuario_id)]

    def criar(self, usuario_id: str, nome: str, cpf: str) -> PerfilDTO:
        try:
            perfil = Perfil(
                id=str(uuid.uuid4()),
                usuario_id=usuario_id,
                nome=nome.strip(),
                cpf=CPF(cpf),
                criado_em=self._relogio(),
            )
        except ValueError as err:
            raise ErroValidacao(str(err)) from err

        # Duplicidade por CPF apenas entre os perfis do mesmo usuario
        if self._perfil_repo.existe_cpf(usuario_id, perfil.cpf):
            raise ErroConflito("CPF ja cadastrado")
        return PerfilDTO.from_domain(self._perfil_repo.criar(perfil))

    def excluir(self, perfil_id: str, usuario_id: str | None = None) -> None:
        """Exclui o perfil e todos os seus beneficiarios."""
        self.garantir_dono(perfil_id, usuario_id)
        with self._beneficiario_repo.transacao():
            self._beneficiario_repo.excluir_por_perfil(perfil_id)
            self._perfil_repo.excluir(perfil_id)
