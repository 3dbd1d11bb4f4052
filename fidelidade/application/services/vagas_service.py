# fidelidade/application/services/vagas_service.py
from __future__ import annotations

from collections.abc import Callable
from dataclasses import replace
from datetime import date, datetime

from fidelidade.domain.beneficiario.entities import Beneficiario
from fidelidade.domain.beneficiario.enums import Programa
from fidelidade.domain.beneficiario.repository import BeneficiarioRepository
from fidelidade.domain.beneficiario.status import calcular_status
from fidelidade.domain.beneficiario.vagas import calcular_vagas_disponiveis
from fidelidade.domain.calendario import agora_brasil, para_dia
from fidelidade.domain.perfil.repository import PerfilRepository

from ..dtos.vagas_dto import ValidacaoDinamicaDTO
from .beneficiario_service import parse_programa
from .perfil_service import PerfilService
from .reconciliacao_service import ReconciliacaoService


class VagasService:
    """Imperative Shell: reconcilia, carrega do repo e chama o Pure Core (vagas.py).

    A referencia pode ser futura ("quantas vagas terei em X"). A regra de nao
    aceitar datas passadas e da borda HTTP, nao daqui.
    """

    def __init__(
        self,
        beneficiario_repo: BeneficiarioRepository,
        perfil_repo: PerfilRepository,
        perfis: PerfilService,
        reconciliacao: ReconciliacaoService,
        relogio: Callable[[], datetime] = agora_brasil,
    ) -> None:
        self._beneficiario_repo = beneficiario_repo
        self._perfil_repo = perfil_repo
        self._perfis = perfis
        self._reconciliacao = reconciliacao
        self._relogio = relogio

    def vagas_disponiveis(
        self,
        perfil_id: str,
        programa: Programa | str,
        referencia: date | datetime | str | None = None,
        usuario_id: str | None = None,
    ) -> int:
        self._perfis.garantir_dono(perfil_id, usuario_id)
        prog = parse_programa(programa)
        self._reconciliacao.reconciliar(perfil_id)
        return self._calcular(perfil_id, prog, referencia)

    def validacao_dinamica(
        self,
        usuario_id: str,
        referencia: date | datetime | str | None = None,
    ) -> list[ValidacaoDinamicaDTO]:
        """Para cada perfil do usuario, vagas disponiveis por programa."""
        resultado: list[ValidacaoDinamicaDTO] = []
        for perfil in self._perfil_repo.listar_por_usuario(usuario_id):
            self._reconciliacao.reconciliar(perfil.id)
            resultado.append(
                ValidacaoDinamicaDTO(
                    perfil_id=perfil.id,
                    perfil_nome=perfil.nome,
                    perfil_cpf=perfil.cpf.valor,
                    disponiveis={
                        prog.value: self._calcular(perfil.id, prog, referencia) for prog in Programa
                    },
                )
            )
        return resultado

    def _calcular(
        self,
        perfil_id: str,
        programa: Programa,
        referencia: date | datetime | str | None,
    ) -> int:
        hoje = para_dia(self._relogio())
        ref = para_dia(referencia) if referencia is not None else hoje
        # Ocupacao AZUL e a de hoje; LATAM/SMILES sao rederivados na referencia
        registros = [self._com_status(b, hoje) for b in self._beneficiario_repo.listar_por_perfil(perfil_id, programa)]
        return calcular_vagas_disponiveis(programa, registros, ref)

    @staticmethod
    def _com_status(b: Beneficiario, hoje: date) -> Beneficiario:
        return replace(
            b,
            status=calcular_status(b.programa, b.data_emissao, b.data_alteracao, hoje, b.is_substituto),
        )
