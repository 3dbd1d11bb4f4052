# fidelidade/application/services/substituicao_service.py
#
# AZUL-only "replace a beneficiary" lifecycle.
#
# Design decisions:
#   - A substitution is two records: the OLD one (being replaced) and the NEW
#     one (carrying nome_anterior/cpf_anterior/data_emissao_anterior). Both are
#     PENDENTE and share data_alteracao and substituicao_id while the
#     quarantine runs.
#   - Every transition touches both halves inside a single repository
#     transaction, so a reader never sees a half-finalized pair.
#   - finalizar/cancelar tolerate a missing other half (already deleted by the
#     sweep or by an explicit delete): the missing side is a no-op.
#   - A swap whose data_emissao is already QUARENTENA_DIAS in the past is
#     consolidated at once instead of opening a pair that the next sweep would
#     finalize anyway.
#
# States per pair:
#   Ativo -> (PendenteAntigo + PendenteNovo) -> Finalizado | Revertido
from __future__ import annotations

import uuid
from collections.abc import Callable
from dataclasses import replace
from datetime import date, datetime

from fidelidade.domain.beneficiario.entities import Beneficiario
from fidelidade.domain.beneficiario.enums import Programa, Status
from fidelidade.domain.beneficiario.repository import BeneficiarioRepository
from fidelidade.domain.beneficiario.status import QUARENTENA_DIAS, calcular_status
from fidelidade.domain.beneficiario.value_objects import CPF
from fidelidade.domain.calendario import agora_brasil, dias_entre, para_dia
from fidelidade.domain.erros import ErroConflito, ErroEstadoInvalido, ErroValidacao
from fidelidade.infrastructure.log import log


class SubstituicaoService:
    def __init__(
        self,
        beneficiario_repo: BeneficiarioRepository,
        relogio: Callable[[], datetime] = agora_brasil,
    ) -> None:
        self._repo = beneficiario_repo
        self._relogio = relogio

    def iniciar(
        self,
        existente: Beneficiario,
        nome: str,
        cpf: CPF,
        data_emissao: date | None = None,
    ) -> Beneficiario:
        """Troca `existente` por um novo CPF. Retorna o registro novo."""
        if existente.programa != Programa.AZUL:
            raise ErroEstadoInvalido("Troca de beneficiario existe apenas no programa AZUL")
        if cpf == existente.cpf:
            raise ErroValidacao("O novo CPF deve ser diferente do atual")
        if existente.em_substituicao and not existente.is_substituto:
            raise ErroEstadoInvalido("Ja existe uma troca pendente para este beneficiario")

        agora = self._relogio()
        hoje = para_dia(agora)

        if existente.is_substituto:
            return self._corrigir_substituto(existente, nome, cpf, data_emissao)

        emissao = data_emissao or hoje
        if dias_entre(emissao, hoje) >= QUARENTENA_DIAS:
            return self._substituir_direto(existente, nome, cpf, emissao, agora)

        substituicao_id = str(uuid.uuid4())
        antigo = replace(
            existente,
            status=Status.PENDENTE,
            data_alteracao=agora,
            substituicao_id=substituicao_id,
        )
        novo = Beneficiario(
            id=str(uuid.uuid4()),
            perfil_id=existente.perfil_id,
            programa=Programa.AZUL,
            nome=nome,
            cpf=cpf,
            data_emissao=emissao,
            status=Status.PENDENTE,
            data_alteracao=agora,
            substituicao_id=substituicao_id,
            nome_anterior=existente.nome,
            cpf_anterior=existente.cpf,
            data_emissao_anterior=existente.data_emissao,
            criado_em=agora,
        )
        with self._repo.transacao():
            self._garantir_cpf_livre(existente, cpf)
            self._repo.atualizar(antigo)
            self._repo.criar(novo)

        log(f"Troca AZUL iniciada: {existente.cpf.mascarado} -> {cpf.mascarado} (perfil {existente.perfil_id})")
        return novo

    def finalizar(self, novo: Beneficiario) -> Beneficiario:
        """Remove o antigo e consolida o novo como UTILIZADO, sem previous*."""
        if not novo.is_substituto:
            raise ErroEstadoInvalido("Apenas o registro substituto pode ser finalizado")

        finalizado = replace(
            novo,
            status=Status.UTILIZADO,
            data_alteracao=None,
            substituicao_id=None,
            nome_anterior=None,
            cpf_anterior=None,
            data_emissao_anterior=None,
        )
        with self._repo.transacao():
            antigo = self._repo.buscar_par(novo)
            if antigo is not None:
                self._repo.excluir(antigo.id)
            self._repo.atualizar(finalizado)

        log(f"Troca AZUL finalizada: {novo.cpf.mascarado} (perfil {novo.perfil_id})")
        return finalizado

    def cancelar(self, beneficiario: Beneficiario) -> Beneficiario | None:
        """Desfaz a troca a partir de qualquer metade. Retorna o original restaurado."""
        hoje = para_dia(self._relogio())
        status = calcular_status(
            beneficiario.programa,
            beneficiario.data_emissao,
            beneficiario.data_alteracao,
            hoje,
            beneficiario.is_substituto,
        )
        if beneficiario.programa != Programa.AZUL or status != Status.PENDENTE:
            raise ErroEstadoInvalido("Apenas alteracoes pendentes do Azul podem ser canceladas")

        with self._repo.transacao():
            par = self._repo.buscar_par(beneficiario)
            if beneficiario.is_substituto:
                restaurado = self._restaurar(par, hoje) if par is not None else None
                self._repo.excluir(beneficiario.id)
            else:
                if par is not None:
                    self._repo.excluir(par.id)
                restaurado = self._restaurar(beneficiario, hoje)

        log(f"Troca AZUL cancelada (perfil {beneficiario.perfil_id})")
        return restaurado

    def _restaurar(self, antigo: Beneficiario, hoje: date) -> Beneficiario:
        restaurado = replace(
            antigo,
            data_alteracao=None,
            substituicao_id=None,
            status=calcular_status(antigo.programa, antigo.data_emissao, None, hoje),
        )
        return self._repo.atualizar(restaurado)

    def _corrigir_substituto(
        self,
        substituto: Beneficiario,
        nome: str,
        cpf: CPF,
        data_emissao: date | None,
    ) -> Beneficiario:
        """Nova tentativa sobre o registro novo: corrige no lugar, mantendo o par."""
        if cpf == substituto.cpf_anterior:
            raise ErroValidacao("O novo CPF deve ser diferente do beneficiario substituido")
        if data_emissao is not None and data_emissao != substituto.data_emissao:
            raise ErroEstadoInvalido("Data de cadastro nao pode mudar durante uma troca pendente")
        corrigido = replace(substituto, nome=nome, cpf=cpf)
        with self._repo.transacao():
            self._garantir_cpf_livre(substituto, cpf)
            self._repo.atualizar(corrigido)
        return corrigido

    def _substituir_direto(
        self,
        existente: Beneficiario,
        nome: str,
        cpf: CPF,
        emissao: date,
        agora: datetime,
    ) -> Beneficiario:
        novo = Beneficiario(
            id=str(uuid.uuid4()),
            perfil_id=existente.perfil_id,
            programa=Programa.AZUL,
            nome=nome,
            cpf=cpf,
            data_emissao=emissao,
            status=Status.UTILIZADO,
            criado_em=agora,
        )
        with self._repo.transacao():
            self._garantir_cpf_livre(existente, cpf)
            self._repo.excluir(existente.id)
            self._repo.criar(novo)

        log(f"Troca AZUL consolidada sem quarentena: {existente.cpf.mascarado} -> {cpf.mascarado}")
        return novo

    def _garantir_cpf_livre(self, existente: Beneficiario, cpf: CPF) -> None:
        if self._repo.existe_cpf(existente.perfil_id, existente.programa, cpf, excluir_id=existente.id):
            raise ErroConflito("CPF ja cadastrado")
