# fidelidade/domain/beneficiario/enums.py
from enum import StrEnum


class Programa(StrEnum):
    LATAM = "LATAM"    # janela movel de 12 meses
    SMILES = "SMILES"  # ano civil
    AZUL = "AZUL"      # vagas simultaneas, troca com quarentena


class Status(StrEnum):
    UTILIZADO = "UTILIZADO"
    LIBERADO = "LIBERADO"
    PENDENTE = "PENDENTE"  # apenas AZUL, durante a quarentena de uma troca
