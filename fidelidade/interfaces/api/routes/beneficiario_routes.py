# fidelidade/interfaces/api/routes/beneficiario_routes.py
from fastapi import APIRouter, Depends, Query

from fidelidade.application.dtos.beneficiario_dto import (
    BeneficiarioDTO,
    CriarBeneficiarioRequest,
    EditarBeneficiarioRequest,
)
from fidelidade.application.services.beneficiario_service import BeneficiarioService
from fidelidade.interfaces.api.dependencies import get_beneficiario_service, get_usuario_id

router = APIRouter()


@router.get("/perfis/{perfil_id}/beneficiarios", response_model=list[BeneficiarioDTO])
def listar_beneficiarios(
    perfil_id: str,
    programa: str | None = Query(default=None),
    usuario_id: str = Depends(get_usuario_id),
    service: BeneficiarioService = Depends(get_beneficiario_service),  # noqa: B008
) -> list[BeneficiarioDTO]:
    return service.listar_com_status(perfil_id, programa, usuario_id=usuario_id)


@router.post("/perfis/{perfil_id}/beneficiarios", response_model=BeneficiarioDTO, status_code=201)
def criar_beneficiario(
    perfil_id: str,
    body: CriarBeneficiarioRequest,
    usuario_id: str = Depends(get_usuario_id),
    service: BeneficiarioService = Depends(get_beneficiario_service),  # noqa: B008
) -> BeneficiarioDTO:
    return service.criar(
        perfil_id,
        body.programa,
        body.nome,
        body.cpf,
        body.data_emissao,
        usuario_id=usuario_id,
    )


@router.delete("/perfis/{perfil_id}/beneficiarios")
def excluir_beneficiarios_do_programa(
    perfil_id: str,
    programa: str = Query(..., min_length=1),
    usuario_id: str = Depends(get_usuario_id),
    service: BeneficiarioService = Depends(get_beneficiario_service),  # noqa: B008
) -> dict[str, int]:
    return {"excluidos": service.excluir_por_programa(perfil_id, programa, usuario_id=usuario_id)}


@router.put("/beneficiarios/{beneficiario_id}", response_model=BeneficiarioDTO)
def editar_beneficiario(
    beneficiario_id: str,
    body: EditarBeneficiarioRequest,
    usuario_id: str = Depends(get_usuario_id),
    service: BeneficiarioService = Depends(get_beneficiario_service),  # noqa: B008
) -> BeneficiarioDTO:
    return service.editar(
        beneficiario_id,
        nome=body.nome,
        cpf=body.cpf,
        data_emissao=body.data_emissao,
        usuario_id=usuario_id,
    )


@router.delete("/beneficiarios/{beneficiario_id}")
def excluir_beneficiario(
    beneficiario_id: str,
    usuario_id: str = Depends(get_usuario_id),
    service: BeneficiarioService = Depends(get_beneficiario_service),  # noqa: B008
) -> dict[str, bool]:
    service.excluir(beneficiario_id, usuario_id=usuario_id)
    return {"ok": True}


@router.post("/beneficiarios/{beneficiario_id}/cancelar-alteracao", response_model=BeneficiarioDTO | None)
def cancelar_alteracao(
    beneficiario_id: str,
    usuario_id: str = Depends(get_usuario_id),
    service: BeneficiarioService = Depends(get_beneficiario_service),  # noqa: B008
) -> BeneficiarioDTO | None:
    return service.cancelar_alteracao(beneficiario_id, usuario_id=usuario_id)
