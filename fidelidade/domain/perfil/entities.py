# fidelidade/domain/perfil/entities.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from fidelidade.domain.beneficiario.value_objects import CPF


@dataclass(frozen=True)
class Perfil:
    """Pessoa cadastrada sob uma conta de usuario. Dona dos beneficiarios."""
    id: str
    usuario_id: str
    nome: str
    cpf: CPF
    criado_em: datetime | None = None

    def __post_init__(self) -> None:
        if not self.nome.strip():
            raise ValueError("Nome do perfil nao pode ser vazio")
