# fidelidade/application/services/reconciliacao_service.py
#
# Lazy sweep over pending AZUL substitutions, run on read paths.
#
# Design decisions:
#   - Status is computed on the fly, but the two physical records of a pair
#     still need to be consolidated eventually. Instead of a scheduled job, the
#     sweep piggybacks on listing/counting: callers run it for one profile
#     right before reading.
#   - Two independent thresholds:
#       * QUARENTENA_DIAS (30) since the NEW record's data_emissao, or the end
#         of the status quarantine, whichever comes first -> finalize.
#       * REMOCAO_ORFAO_DIAS (60) since an OLD record's data_alteracao, when
#         its new half no longer exists -> delete the old record.
#   - Each record is handled in its own transaction. Any failure on one record
#     is logged and counted; the sweep continues with the rest.
#   - Olds are re-read after the finalize pass because finalizing deletes them.
from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, datetime

from fidelidade.domain.beneficiario.entities import Beneficiario
from fidelidade.domain.beneficiario.repository import BeneficiarioRepository
from fidelidade.domain.beneficiario.status import QUARENTENA_DIAS, REMOCAO_ORFAO_DIAS, fim_quarentena
from fidelidade.domain.calendario import agora_brasil, dias_entre, para_dia
from fidelidade.infrastructure.log import log

from .substituicao_service import SubstituicaoService


@dataclass
class ResultadoReconciliacao:
    finalizados: int = 0
    removidos: int = 0
    falhas: int = 0


class ReconciliacaoService:
    def __init__(
        self,
        beneficiario_repo: BeneficiarioRepository,
        substituicao: SubstituicaoService,
        relogio: Callable[[], datetime] = agora_brasil,
    ) -> None:
        self._repo = beneficiario_repo
        self._substituicao = substituicao
        self._relogio = relogio

    def reconciliar(self, perfil_id: str | None = None) -> ResultadoReconciliacao:
        """Sem perfil_id varre todos os perfis."""
        hoje = para_dia(self._relogio())
        resultado = ResultadoReconciliacao()

        for novo in self._repo.listar_pendentes_azul(perfil_id):
            if not is_finalizavel(novo, hoje):
                continue
            try:
                self._substituicao.finalizar(novo)
                resultado.finalizados += 1
            except Exception as err:
                resultado.falhas += 1
                log(f"Erro finalizando troca AZUL {novo.id}: {err}")

        for antigo in self._repo.listar_pendentes_azul(perfil_id):
            if antigo.is_substituto or antigo.data_alteracao is None:
                continue
            if dias_entre(antigo.data_alteracao, hoje) < REMOCAO_ORFAO_DIAS:
                continue
            try:
                if self._remover_orfao(antigo):
                    resultado.removidos += 1
            except Exception as err:
                resultado.falhas += 1
                log(f"Erro removendo beneficiario AZUL orfao {antigo.id}: {err}")

        if resultado.finalizados or resultado.removidos or resultado.falhas:
            log(
                f"Reconciliacao AZUL{f' (perfil {perfil_id})' if perfil_id else ''}: "
                f"{resultado.finalizados} finalizada(s), {resultado.removidos} removido(s), "
                f"{resultado.falhas} falha(s)"
            )
        return resultado

    def _remover_orfao(self, antigo: Beneficiario) -> bool:
        with self._repo.transacao():
            if self._repo.buscar_par(antigo) is not None:
                return False
            self._repo.excluir(antigo.id)
        return True


def is_finalizavel(novo: Beneficiario, hoje: date) -> bool:
    """Registro novo de troca que ja cumpriu a quarentena.

    Vale a ancora que vencer primeiro: data_emissao do registro novo ou o fim da
    quarentena de status (data_alteracao). Um par que ja nao e PENDENTE nunca
    fica esperando a varredura.
    """
    if not novo.is_substituto:
        return False
    if dias_entre(novo.data_emissao, hoje) >= QUARENTENA_DIAS:
        return True
    return novo.data_alteracao is not None and hoje >= fim_quarentena(novo.data_alteracao)
