# fidelidade/application/dtos/beneficiario_dto.py
from __future__ import annotations

from datetime import date

from pydantic import BaseModel

from fidelidade.domain.beneficiario.entities import Beneficiario
from fidelidade.domain.beneficiario.enums import Status
from fidelidade.domain.beneficiario.status import calcular_status, dias_restantes_quarentena


class BeneficiarioDTO(BaseModel):
    id: str
    perfil_id: str
    programa: str
    nome: str
    cpf: str
    data_emissao: str
    status: str
    data_alteracao: str | None
    nome_anterior: str | None
    cpf_anterior: str | None
    data_emissao_anterior: str | None
    dias_restantes_quarentena: int | None

    @classmethod
    def from_domain(cls, b: Beneficiario, referencia: date) -> BeneficiarioDTO:
        """Status sempre recalculado na referencia; o valor persistido e apenas cache."""
        status = calcular_status(b.programa, b.data_emissao, b.data_alteracao, referencia, b.is_substituto)
        return cls(
            id=b.id,
            perfil_id=b.perfil_id,
            programa=b.programa.value,
            nome=b.nome,
            cpf=b.cpf.valor,
            data_emissao=b.data_emissao.isoformat(),
            status=status.value,
            data_alteracao=b.data_alteracao.isoformat() if b.data_alteracao else None,
            nome_anterior=b.nome_anterior,
            cpf_anterior=b.cpf_anterior.valor if b.cpf_anterior else None,
            data_emissao_anterior=(
                b.data_emissao_anterior.isoformat() if b.data_emissao_anterior else None
            ),
            dias_restantes_quarentena=(
                dias_restantes_quarentena(b.data_alteracao, referencia)
                if status == Status.PENDENTE
                else None
            ),
        )


class CriarBeneficiarioRequest(BaseModel):
    programa: str
    nome: str
    cpf: str
    data_emissao: str


class EditarBeneficiarioRequest(BaseModel):
    nome: str | None = None
    cpf: str | None = None
    data_emissao: str | None = None
