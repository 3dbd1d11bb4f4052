# fidelidade/application/dtos/vagas_dto.py
from pydantic import BaseModel


class VagasDTO(BaseModel):
    perfil_id: str
    programa: str
    referencia: str
    disponiveis: int


class ValidacaoDinamicaDTO(BaseModel):
    perfil_id: str
    perfil_nome: str
    perfil_cpf: str
    disponiveis: dict[str, int]
