# fidelidade/domain/beneficiario/status.py
#
# Pure status calculator: (programa, datas, referencia) -> Status.
#
# Design decisions:
#   - One function for the three programs. The rule set is closed-world
#     (exactly three programs), so a dispatch on Programa is clearer than a
#     strategy registry.
#   - Every comparison is at calendar-day granularity via calendario.para_dia,
#     so a time-of-day on data_alteracao never shifts the outcome.
#   - referencia defaults to "today in Brazil". Passing it explicitly keeps the
#     function pure for tests and for forward-looking slot queries.
#
# Invariants:
#   - LATAM: UTILIZADO strictly before the first anniversary of data_emissao,
#     LIBERADO on the anniversary itself and after.
#   - SMILES: UTILIZADO until Jan 1 of the year after data_emissao, LIBERADO
#     from that day on.
#   - AZUL: PENDENTE strictly before dia(data_alteracao) + QUARENTENA_DIAS;
#     afterwards UTILIZADO for the substitute, LIBERADO for the replaced one.
#     Without data_alteracao an AZUL record is always UTILIZADO.
from __future__ import annotations

from datetime import date, datetime, timedelta

from fidelidade.domain.calendario import hoje_brasil, para_dia, somar_anos

from .enums import Programa, Status

# ADR: uma unica quarentena para status e finalizacao (30 dias).
# A remocao de registros antigos orfaos e um limite independente (60 dias).
QUARENTENA_DIAS = 30
REMOCAO_ORFAO_DIAS = 60


def calcular_status(
    programa: Programa,
    data_emissao: date | datetime | str,
    data_alteracao: date | datetime | str | None = None,
    referencia: date | datetime | str | None = None,
    is_substituto: bool = False,
) -> Status:
    """Funcao pura. Mesma entrada = mesma saida. Zero IO."""
    emissao = para_dia(data_emissao)
    ref = para_dia(referencia) if referencia is not None else hoje_brasil()

    if programa == Programa.LATAM:
        return Status.UTILIZADO if ref < somar_anos(emissao, 1) else Status.LIBERADO

    if programa == Programa.SMILES:
        reinicio = date(emissao.year + 1, 1, 1)
        return Status.UTILIZADO if ref < reinicio else Status.LIBERADO

    if data_alteracao is None:
        return Status.UTILIZADO
    if ref < fim_quarentena(data_alteracao):
        return Status.PENDENTE
    return Status.UTILIZADO if is_substituto else Status.LIBERADO


def fim_quarentena(data_alteracao: date | datetime | str) -> date:
    """Primeiro dia fora da quarentena AZUL."""
    return para_dia(data_alteracao) + timedelta(days=QUARENTENA_DIAS)


def dias_restantes_quarentena(
    data_alteracao: date | datetime | str | None,
    referencia: date | datetime | str | None = None,
) -> int:
    """Dias ate o fim da quarentena. 0 quando nao ha troca ou ela ja terminou."""
    if data_alteracao is None:
        return 0
    ref = para_dia(referencia) if referencia is not None else hoje_brasil()
    return max(0, (fim_quarentena(data_alteracao) - ref).days)
