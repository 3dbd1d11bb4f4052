# fidelidade/interfaces/api/routes/vagas_routes.py
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query

from fidelidade.application.dtos.vagas_dto import ValidacaoDinamicaDTO, VagasDTO
from fidelidade.application.services.beneficiario_service import parse_programa
from fidelidade.application.services.vagas_service import VagasService
from fidelidade.domain.calendario import hoje_brasil, parse_data
from fidelidade.interfaces.api.dependencies import get_usuario_id, get_vagas_service

router = APIRouter()


def _referencia(data: str | None) -> date:
    """Politica da borda: a data consultada nao pode estar no passado."""
    hoje = hoje_brasil()
    if data is None:
        return hoje
    try:
        referencia = parse_data(data)
    except ValueError as err:
        raise HTTPException(status_code=422, detail="Data invalida") from err
    if referencia < hoje:
        raise HTTPException(status_code=422, detail="A data de referencia nao pode estar no passado")
    return referencia


@router.get("/perfis/{perfil_id}/vagas", response_model=VagasDTO)
def vagas_disponiveis(
    perfil_id: str,
    programa: str = Query(..., min_length=1),
    data: str | None = Query(default=None),
    usuario_id: str = Depends(get_usuario_id),
    service: VagasService = Depends(get_vagas_service),  # noqa: B008
) -> VagasDTO:
    referencia = _referencia(data)
    disponiveis = service.vagas_disponiveis(perfil_id, programa, referencia, usuario_id=usuario_id)
    return VagasDTO(
        perfil_id=perfil_id,
        programa=parse_programa(programa).value,
        referencia=referencia.isoformat(),
        disponiveis=disponiveis,
    )


@router.get("/validacao-dinamica", response_model=list[ValidacaoDinamicaDTO])
def validacao_dinamica(
    data: str | None = Query(default=None),
    usuario_id: str = Depends(get_usuario_id),
    service: VagasService = Depends(get_vagas_service),  # noqa: B008
) -> list[ValidacaoDinamicaDTO]:
    return service.validacao_dinamica(usuario_id, _referencia(data))
