# fidelidade/interfaces/api/routes/perfil_routes.py
from fastapi import APIRouter, Depends, Response

from fidelidade.application.dtos.perfil_dto import CriarPerfilRequest, PerfilDTO
from fidelidade.application.services.perfil_service import PerfilService
from fidelidade.interfaces.api.dependencies import get_perfil_service, get_usuario_id

router = APIRouter()


@router.get("/perfis", response_model=list[PerfilDTO])
def listar_perfis(
    usuario_id: str = Depends(get_usuario_id),
    service: PerfilService = Depends(get_perfil_service),  # noqa: B008
) -> list[PerfilDTO]:
    return service.listar(usuario_id)


@router.post("/perfis", response_model=PerfilDTO, status_code=201)
def criar_perfil(
    body: CriarPerfilRequest,
    usuario_id: str = Depends(get_usuario_id),
    service: PerfilService = Depends(get_perfil_service),  # noqa: B008
) -> PerfilDTO:
    return service.criar(usuario_id, body.nome, body.cpf)


@router.delete("/perfis/{perfil_id}", status_code=204)
def excluir_perfil(
    perfil_id: str,
    usuario_id: str = Depends(get_usuario_id),
    service: PerfilService = Depends(get_perfil_service),  # noqa: B008
) -> Response:
    service.excluir(perfil_id, usuario_id)
    return Response(status_code=204)
