# fidelidade/domain/beneficiario/vagas.py
"""Contagem de vagas disponiveis por perfil+programa. Funcao pura, zero IO.

ADR: LATAM/SMILES contam capacidade (vaga liberada pode ser reaproveitada),
AZUL conta ocupacao (um par de troca pendente reserva UMA vaga).
"""
from __future__ import annotations

from collections.abc import Iterable
from datetime import date, datetime

from .entities import Beneficiario
from .enums import Programa, Status
from .status import calcular_status

LIMITES: dict[Programa, int] = {
    Programa.LATAM: 25,
    Programa.SMILES: 25,
    Programa.AZUL: 5,
}


def ocupacao_azul(beneficiarios: Iterable[Beneficiario]) -> int:
    """Registros nao pendentes contam 1 cada; cada par pendente conta 1 no total."""
    nao_pendentes = 0
    pares: set[object] = set()
    for b in beneficiarios:
        if b.status == Status.PENDENTE and b.chave_par is not None:
            pares.add(b.chave_par)
        else:
            nao_pendentes += 1
    return nao_pendentes + len(pares)


def calcular_vagas_disponiveis(
    programa: Programa,
    beneficiarios: Iterable[Beneficiario],
    referencia: date | datetime | str,
) -> int:
    """Vagas livres para novos cadastros. Nunca negativo.

    `beneficiarios` sao todos os registros de UM perfil no programa. Para AZUL
    o campo status de cada registro e usado como esta (o chamador recalcula
    antes); para LATAM/SMILES o status e derivado de novo na referencia.
    """
    limite = LIMITES[programa]
    registros = [b for b in beneficiarios if b.programa == programa]

    if programa == Programa.AZUL:
        return max(0, limite - ocupacao_azul(registros))

    liberados = sum(
        1
        for b in registros
        if calcular_status(programa, b.data_emissao, b.data_alteracao, referencia) == Status.LIBERADO
    )
    return max(0, limite - len(registros)) + liberados
