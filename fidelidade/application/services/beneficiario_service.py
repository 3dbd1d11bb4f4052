# fidelidade/application/services/beneficiario_service.py
#
# Imperative shell for beneficiary operations.
#
# Design decisions:
#   - Validation (programa, nome, CPF, data) happens before any repository
#     call and surfaces as ErroValidacao.
#   - Reads run the reconciliation sweep for the profile first, then recompute
#     every status against today (BeneficiarioDTO.from_domain). The persisted
#     status is only a cache.
#   - Edits route to SubstituicaoService when an AZUL record changes CPF; every
#     other edit is a plain field update with the status recomputed.
#   - Enrollment limits follow each program's window: AZUL counts current
#     occupancy (a pending pair is one slot), LATAM counts enrollments in the
#     12 months up to the new data_emissao, SMILES counts the calendar year.
from __future__ import annotations

import uuid
from collections.abc import Callable
from dataclasses import replace
from datetime import date, datetime

from fidelidade.domain.beneficiario.entities import Beneficiario
from fidelidade.domain.beneficiario.enums import Programa
from fidelidade.domain.beneficiario.repository import BeneficiarioRepository
from fidelidade.domain.beneficiario.status import calcular_status
from fidelidade.domain.beneficiario.vagas import LIMITES, ocupacao_azul
from fidelidade.domain.beneficiario.value_objects import CPF, NomeBeneficiario
from fidelidade.domain.calendario import agora_brasil, is_data_canonica, para_dia, parse_data, somar_anos
from fidelidade.domain.erros import (
    ErroConflito,
    ErroEstadoInvalido,
    ErroLimiteExcedido,
    ErroNaoEncontrado,
    ErroValidacao,
)

from ..dtos.beneficiario_dto import BeneficiarioDTO
from .perfil_service import PerfilService
from .reconciliacao_service import ReconciliacaoService
from .substituicao_service import SubstituicaoService


def parse_programa(valor: Programa | str) -> Programa:
    try:
        return Programa(str(valor).strip().upper())
    except ValueError as err:
        raise ErroValidacao(f"Programa invalido: {valor}") from err


def _validar_nome(nome: str) -> str:
    try:
        return NomeBeneficiario(nome).valor
    except ValueError as err:
        raise ErroValidacao(str(err)) from err


def _validar_cpf(cpf: str) -> CPF:
    try:
        return CPF(cpf)
    except ValueError as err:
        raise ErroValidacao(str(err)) from err


def _validar_data_emissao(valor: str | date, hoje: date) -> date:
    if isinstance(valor, str):
        if not is_data_canonica(valor):
            raise ErroValidacao("Formato de data invalido. Use YYYY-MM-DD")
        try:
            dia = parse_data(valor)
        except ValueError as err:
            raise ErroValidacao("Data invalida") from err
    else:
        dia = para_dia(valor)
    if dia > hoje:
        raise ErroValidacao("Data de cadastro nao pode ser futura")
    return dia


class BeneficiarioService:
    def __init__(
        self,
        beneficiario_repo: BeneficiarioRepository,
        perfis: PerfilService,
        substituicao: SubstituicaoService,
        reconciliacao: ReconciliacaoService,
        relogio: Callable[[], datetime] = agora_brasil,
    ) -> None:
        self._repo = beneficiario_repo
        self._perfis = perfis
        self._substituicao = substituicao
        self._reconciliacao = reconciliacao
        self._relogio = relogio

    def listar_com_status(
        self,
        perfil_id: str,
        programa: Programa | str | None = None,
        usuario_id: str | None = None,
    ) -> list[BeneficiarioDTO]:
        self._perfis.garantir_dono(perfil_id, usuario_id)
        prog = parse_programa(programa) if programa else None

        self._reconciliacao.reconciliar(perfil_id)

        hoje = self._hoje()
        return [BeneficiarioDTO.from_domain(b, hoje) for b in self._repo.listar_por_perfil(perfil_id, prog)]

    def criar(
        self,
        perfil_id: str,
        programa: Programa | str,
        nome: str,
        cpf: str,
        data_emissao: str | date,
        usuario_id: str | None = None,
    ) -> BeneficiarioDTO:
        self._perfis.garantir_dono(perfil_id, usuario_id)
        prog = parse_programa(programa)
        nome_valido = _validar_nome(nome)
        cpf_valido = _validar_cpf(cpf)

        agora = self._relogio()
        hoje = para_dia(agora)
        emissao = _validar_data_emissao(data_emissao, hoje)

        if prog == Programa.AZUL:
            self._reconciliacao.reconciliar(perfil_id)

        beneficiario = Beneficiario(
            id=str(uuid.uuid4()),
            perfil_id=perfil_id,
            programa=prog,
            nome=nome_valido,
            cpf=cpf_valido,
            data_emissao=emissao,
            status=calcular_status(prog, emissao, None, hoje),
            criado_em=agora,
        )
        with self._repo.transacao():
            self._verificar_limite(perfil_id, prog, emissao, hoje)
            if self._repo.existe_cpf(perfil_id, prog, cpf_valido):
                raise ErroConflito("CPF ja cadastrado")
            self._repo.criar(beneficiario)

        return BeneficiarioDTO.from_domain(beneficiario, hoje)

    def editar(
        self,
        beneficiario_id: str,
        nome: str | None = None,
        cpf: str | None = None,
        data_emissao: str | date | None = None,
        usuario_id: str | None = None,
    ) -> BeneficiarioDTO:
        existente = self._buscar(beneficiario_id, usuario_id)
        hoje = self._hoje()

        novo_nome = _validar_nome(nome) if nome is not None else existente.nome
        novo_cpf = _validar_cpf(cpf) if cpf is not None else existente.cpf
        nova_data = _validar_data_emissao(data_emissao, hoje) if data_emissao is not None else None

        mudou_cpf = novo_cpf != existente.cpf
        mudou = (
            novo_nome != existente.nome
            or mudou_cpf
            or (nova_data is not None and nova_data != existente.data_emissao)
        )
        if not mudou:
            raise ErroEstadoInvalido("Nenhuma alteracao detectada")
        # a quarentena de uma troca pendente ancora em data_alteracao e data_emissao juntas
        if existente.em_substituicao and nova_data is not None and nova_data != existente.data_emissao:
            raise ErroEstadoInvalido("Data de cadastro nao pode mudar durante uma troca pendente")

        if existente.programa == Programa.AZUL and mudou_cpf:
            novo = self._substituicao.iniciar(existente, novo_nome, novo_cpf, nova_data)
            return BeneficiarioDTO.from_domain(novo, hoje)

        emissao = nova_data or existente.data_emissao
        atualizado = replace(
            existente,
            nome=novo_nome,
            cpf=novo_cpf,
            data_emissao=emissao,
            status=calcular_status(
                existente.programa, emissao, existente.data_alteracao, hoje, existente.is_substituto,
            ),
        )
        with self._repo.transacao():
            if mudou_cpf and self._repo.existe_cpf(
                existente.perfil_id, existente.programa, novo_cpf, excluir_id=existente.id,
            ):
                raise ErroConflito("CPF ja cadastrado")
            self._repo.atualizar(atualizado)
        return BeneficiarioDTO.from_domain(atualizado, hoje)

    def cancelar_alteracao(
        self,
        beneficiario_id: str,
        usuario_id: str | None = None,
    ) -> BeneficiarioDTO | None:
        """Cancela a troca AZUL pendente. Retorna o beneficiario original restaurado."""
        existente = self._buscar(beneficiario_id, usuario_id)
        restaurado = self._substituicao.cancelar(existente)
        return BeneficiarioDTO.from_domain(restaurado, self._hoje()) if restaurado else None

    def excluir(self, beneficiario_id: str, usuario_id: str | None = None) -> None:
        existente = self._buscar(beneficiario_id, usuario_id)
        with self._repo.transacao():
            self._repo.excluir(existente.id)

    def excluir_por_programa(
        self,
        perfil_id: str,
        programa: Programa | str,
        usuario_id: str | None = None,
    ) -> int:
        self._perfis.garantir_dono(perfil_id, usuario_id)
        prog = parse_programa(programa)
        with self._repo.transacao():
            return self._repo.excluir_por_programa(perfil_id, prog)

    def _buscar(self, beneficiario_id: str, usuario_id: str | None) -> Beneficiario:
        existente = self._repo.buscar_por_id(beneficiario_id)
        if existente is None:
            raise ErroNaoEncontrado("Beneficiario nao encontrado")
        self._perfis.garantir_dono(existente.perfil_id, usuario_id)
        return existente

    def _verificar_limite(self, perfil_id: str, programa: Programa, emissao: date, hoje: date) -> None:
        limite = LIMITES[programa]

        if programa == Programa.AZUL:
            atuais = [
                replace(b, status=calcular_status(b.programa, b.data_emissao, b.data_alteracao, hoje, b.is_substituto))
                for b in self._repo.listar_por_perfil(perfil_id, programa)
            ]
            if ocupacao_azul(atuais) >= limite:
                raise ErroLimiteExcedido(f"Limite de {limite} atingido para {programa.value}")
            return

        if programa == Programa.LATAM:
            inicio = somar_anos(emissao, -1)
            if self._repo.contar_por_periodo(perfil_id, programa, inicio, emissao) >= limite:
                raise ErroLimiteExcedido(
                    f"Limite de {limite} atingido para {programa.value} no periodo de 12 meses"
                )
            return

        inicio_ano, fim_ano = date(emissao.year, 1, 1), date(emissao.year, 12, 31)
        if self._repo.contar_por_periodo(perfil_id, programa, inicio_ano, fim_ano) >= limite:
            raise ErroLimiteExcedido(
                f"Limite de {limite} atingido para {programa.value} no ano {emissao.year}"
            )

    def _hoje(self) -> date:
        return para_dia(self._relogio())
