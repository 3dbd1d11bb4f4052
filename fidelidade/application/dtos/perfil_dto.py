# fidelidade/application/dtos/perfil_dto.py
from __future__ import annotations

from pydantic import BaseModel, Field

from fidelidade.domain.perfil.entities import Perfil


class PerfilDTO(BaseModel):
    id: str
    nome: str
    cpf: str

    @classmethod
    def from_domain(cls, perfil: Perfil) -> PerfilDTO:
        return cls(id=perfil.id, nome=perfil.nome, cpf=perfil.cpf.valor)


class CriarPerfilRequest(BaseModel):
    nome: str = Field(..., min_length=1, max_length=100)
    cpf: str = Field(..., min_length=11, max_length=14)
