# fidelidade/domain/beneficiario/entities.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime

from .enums import Programa, Status
from .value_objects import CPF


@dataclass(frozen=True)
class Beneficiario:
    """Aggregate Root. Imutavel: mudancas produzem nova instancia via dataclasses.replace.

    `status` e um cache da derivacao pura (status.calcular_status); a leitura
    sempre recalcula. Os campos *_anterior existem apenas no registro NOVO de
    uma troca AZUL e apontam para o registro substituido."""
    id: str
    perfil_id: str
    programa: Programa
    nome: str
    cpf: CPF
    data_emissao: date
    status: Status
    data_alteracao: datetime | None = None  # compartilhada pelas duas metades do par
    substituicao_id: str | None = None
    nome_anterior: str | None = None
    cpf_anterior: CPF | None = None
    data_emissao_anterior: date | None = None
    criado_em: datetime | None = None

    @property
    def is_substituto(self) -> bool:
        """Metade nova de uma troca AZUL (tem previous*)."""
        return self.cpf_anterior is not None

    @property
    def em_substituicao(self) -> bool:
        return self.data_alteracao is not None

    @property
    def chave_par(self) -> str | datetime | None:
        """Identifica o par de troca: substituicao_id, ou data_alteracao em registros antigos."""
        if self.substituicao_id is not None:
            return self.substituicao_id
        return self.data_alteracao
