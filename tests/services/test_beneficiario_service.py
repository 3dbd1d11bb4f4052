# tests/services/test_beneficiario_service.py
import pytest

from fidelidade.domain.erros import (
    ErroAcessoNegado,
    ErroConflito,
    ErroEstadoInvalido,
    ErroLimiteExcedido,
    ErroNaoEncontrado,
    ErroValidacao,
)

USUARIO = "usuario-1"


# --- Cadastro ---

def test_criar_calcula_status(beneficiario_service, perfil_id, gerar_cpf):
    dto = beneficiario_service.criar(perfil_id, "latam", "  Ana Maria  ", gerar_cpf(1), "2025-01-10")
    assert dto.programa == "LATAM"
    assert dto.nome == "Ana Maria"
    assert dto.status == "UTILIZADO"
    assert dto.data_emissao == "2025-01-10"
    assert dto.dias_restantes_quarentena is None


def test_criar_programa_invalido(beneficiario_service, perfil_id, gerar_cpf):
    with pytest.raises(ErroValidacao, match="Programa invalido"):
        beneficiario_service.criar(perfil_id, "GOL", "Ana Maria", gerar_cpf(1), "2025-01-10")


@pytest.mark.parametrize("data", ["10/01/2025", "2025-1-10", "2025-02-30", ""])
def test_criar_data_invalida(beneficiario_service, perfil_id, gerar_cpf, data):
    with pytest.raises(ErroValidacao):
        beneficiario_service.criar(perfil_id, "LATAM", "Ana Maria", gerar_cpf(1), data)


def test_criar_data_futura(beneficiario_service, perfil_id, gerar_cpf):
    with pytest.raises(ErroValidacao, match="futura"):
        beneficiario_service.criar(perfil_id, "LATAM", "Ana Maria", gerar_cpf(1), "2025-03-02")


def test_criar_nome_invalido(beneficiario_service, perfil_id, gerar_cpf):
    with pytest.raises(ErroValidacao, match="Nome invalido"):
        beneficiario_service.criar(perfil_id, "LATAM", "Ana", gerar_cpf(1), "2025-01-10")


def test_criar_cpf_invalido(beneficiario_service, perfil_id):
    with pytest.raises(ErroValidacao, match="CPF invalido"):
        beneficiario_service.criar(perfil_id, "LATAM", "Ana Maria", "11144477700", "2025-01-10")


def test_criar_cpf_duplicado_no_programa(beneficiario_service, perfil_id, gerar_cpf):
    beneficiario_service.criar(perfil_id, "LATAM", "Ana Maria", gerar_cpf(1), "2025-01-10")
    with pytest.raises(ErroConflito):
        beneficiario_service.criar(perfil_id, "LATAM", "Ana Maria", gerar_cpf(1), "2025-01-11")


def test_mesmo_cpf_em_outro_programa(beneficiario_service, perfil_id, gerar_cpf):
    beneficiario_service.criar(perfil_id, "LATAM", "Ana Maria", gerar_cpf(1), "2025-01-10")
    dto = beneficiario_service.criar(perfil_id, "SMILES", "Ana Maria", gerar_cpf(1), "2025-01-10")
    assert dto.programa == "SMILES"


def test_criar_perfil_inexistente(beneficiario_service, gerar_cpf):
    with pytest.raises(ErroNaoEncontrado):
        beneficiario_service.criar("nao-existe", "LATAM", "Ana Maria", gerar_cpf(1), "2025-01-10")


def test_criar_em_perfil_de_outro_usuario(beneficiario_service, perfil_id, gerar_cpf):
    with pytest.raises(ErroAcessoNegado):
        beneficiario_service.criar(
            perfil_id, "LATAM", "Ana Maria", gerar_cpf(1), "2025-01-10", usuario_id="intruso",
        )


# --- Limites ---

def test_limite_azul(beneficiario_service, perfil_id, gerar_cpf):
    for i in range(5):
        beneficiario_service.criar(perfil_id, "AZUL", "Pessoa Azul", gerar_cpf(i), "2025-01-10")
    with pytest.raises(ErroLimiteExcedido, match="Limite de 5"):
        beneficiario_service.criar(perfil_id, "AZUL", "Pessoa Azul", gerar_cpf(5), "2025-01-10")


def test_limite_latam_janela_de_12_meses(beneficiario_service, perfil_id, gerar_cpf):
    for i in range(25):
        beneficiario_service.criar(perfil_id, "LATAM", "Pessoa Latam", gerar_cpf(i), "2024-01-10")

    # janela [2024-01-10, 2025-01-10] inclui os 25
    with pytest.raises(ErroLimiteExcedido, match="12 meses"):
        beneficiario_service.criar(perfil_id, "LATAM", "Pessoa Latam", gerar_cpf(25), "2025-01-10")

    # janela [2024-02-01, 2025-02-01] ja nao inclui nenhum
    dto = beneficiario_service.criar(perfil_id, "LATAM", "Pessoa Latam", gerar_cpf(25), "2025-02-01")
    assert dto.status == "UTILIZADO"


def test_limite_smiles_por_ano(beneficiario_service, perfil_id, gerar_cpf):
    for i in range(25):
        beneficiario_service.criar(perfil_id, "SMILES", "Pessoa Smiles", gerar_cpf(i), "2024-05-10")

    with pytest.raises(ErroLimiteExcedido, match="2024"):
        beneficiario_service.criar(perfil_id, "SMILES", "Pessoa Smiles", gerar_cpf(25), "2024-12-31")

    beneficiario_service.criar(perfil_id, "SMILES", "Pessoa Smiles", gerar_cpf(25), "2025-01-01")


# --- Edicao ---

def test_editar_sem_mudancas(beneficiario_service, perfil_id, gerar_cpf):
    dto = beneficiario_service.criar(perfil_id, "LATAM", "Ana Maria", gerar_cpf(1), "2025-01-10")
    with pytest.raises(ErroEstadoInvalido, match="Nenhuma alteracao"):
        beneficiario_service.editar(dto.id, nome="Ana Maria", data_emissao="2025-01-10")


def test_editar_latam_nome_e_data(beneficiario_service, perfil_id, gerar_cpf):
    dto = beneficiario_service.criar(perfil_id, "LATAM", "Ana Maria", gerar_cpf(1), "2025-01-10")

    editado = beneficiario_service.editar(dto.id, nome="Ana Maria Souza", data_emissao="2024-02-01")

    assert editado.id == dto.id
    assert editado.nome == "Ana Maria Souza"
    assert editado.data_emissao == "2024-02-01"
    assert editado.status == "LIBERADO"


def test_editar_latam_cpf_atualiza_no_lugar(beneficiario_service, perfil_id, gerar_cpf):
    dto = beneficiario_service.criar(perfil_id, "LATAM", "Ana Maria", gerar_cpf(1), "2025-01-10")

    editado = beneficiario_service.editar(dto.id, cpf=gerar_cpf(2))

    assert editado.id == dto.id
    assert editado.cpf == gerar_cpf(2)
    assert editado.cpf_anterior is None
    assert len(beneficiario_service.listar_com_status(perfil_id)) == 1


def test_editar_cpf_para_cpf_existente(beneficiario_service, perfil_id, gerar_cpf):
    beneficiario_service.criar(perfil_id, "LATAM", "Ana Maria", gerar_cpf(1), "2025-01-10")
    dto = beneficiario_service.criar(perfil_id, "LATAM", "Bruno Lima", gerar_cpf(2), "2025-01-10")
    with pytest.raises(ErroConflito):
        beneficiario_service.editar(dto.id, cpf=gerar_cpf(1))


def test_editar_azul_cpf_inicia_troca(beneficiario_service, perfil_id, gerar_cpf):
    dto = beneficiario_service.criar(perfil_id, "AZUL", "Ana Maria", gerar_cpf(1), "2025-01-10")

    novo = beneficiario_service.editar(dto.id, nome="Bruno Lima", cpf=gerar_cpf(2))

    assert novo.id != dto.id
    assert novo.status == "PENDENTE"
    assert novo.cpf_anterior == gerar_cpf(1)
    assert novo.nome_anterior == "Ana Maria"
    assert novo.dias_restantes_quarentena == 30
    status = sorted(b.status for b in beneficiario_service.listar_com_status(perfil_id, "AZUL"))
    assert status == ["PENDENTE", "PENDENTE"]


def test_editar_azul_so_nome_nao_inicia_troca(beneficiario_service, perfil_id, gerar_cpf):
    dto = beneficiario_service.criar(perfil_id, "AZUL", "Ana Maria", gerar_cpf(1), "2025-01-10")
    editado = beneficiario_service.editar(dto.id, nome="Ana Maria Souza")
    assert editado.id == dto.id
    assert editado.status == "UTILIZADO"


def test_editar_inexistente(beneficiario_service):
    with pytest.raises(ErroNaoEncontrado):
        beneficiario_service.editar("nao-existe", nome="Ana Maria")


def test_editar_de_outro_usuario(beneficiario_service, perfil_id, gerar_cpf):
    dto = beneficiario_service.criar(perfil_id, "LATAM", "Ana Maria", gerar_cpf(1), "2025-01-10")
    with pytest.raises(ErroAcessoNegado):
        beneficiario_service.editar(dto.id, nome="Outro Nome", usuario_id="intruso")


# --- Cancelamento, listagem e exclusao ---

def test_cancelar_alteracao_restaura_original(beneficiario_service, perfil_id, gerar_cpf):
    dto = beneficiario_service.criar(perfil_id, "AZUL", "Ana Maria", gerar_cpf(1), "2025-01-10")
    novo = beneficiario_service.editar(dto.id, cpf=gerar_cpf(2))

    restaurado = beneficiario_service.cancelar_alteracao(novo.id, usuario_id=USUARIO)

    assert restaurado is not None
    assert restaurado.id == dto.id
    assert restaurado.cpf == gerar_cpf(1)
    assert restaurado.status == "UTILIZADO"
    assert restaurado.data_alteracao is None
    assert [b.id for b in beneficiario_service.listar_com_status(perfil_id)] == [dto.id]


def test_cancelar_alteracao_sem_troca(beneficiario_service, perfil_id, gerar_cpf):
    dto = beneficiario_service.criar(perfil_id, "LATAM", "Ana Maria", gerar_cpf(1), "2025-01-10")
    with pytest.raises(ErroEstadoInvalido):
        beneficiario_service.cancelar_alteracao(dto.id)


def test_listar_recalcula_status_na_data_atual(beneficiario_service, perfil_id, gerar_cpf, relogio):
    beneficiario_service.criar(perfil_id, "LATAM", "Ana Maria", gerar_cpf(1), "2024-03-15")
    assert beneficiario_service.listar_com_status(perfil_id)[0].status == "UTILIZADO"

    relogio.avancar(14)

    assert beneficiario_service.listar_com_status(perfil_id)[0].status == "LIBERADO"


def test_listar_filtra_por_programa(beneficiario_service, perfil_id, gerar_cpf):
    beneficiario_service.criar(perfil_id, "LATAM", "Ana Maria", gerar_cpf(1), "2025-01-10")
    beneficiario_service.criar(perfil_id, "SMILES", "Bruno Lima", gerar_cpf(2), "2025-01-10")
    assert [b.programa for b in beneficiario_service.listar_com_status(perfil_id, "smiles")] == ["SMILES"]
    assert len(beneficiario_service.listar_com_status(perfil_id)) == 2


def test_listar_consolida_trocas_vencidas(beneficiario_service, perfil_id, gerar_cpf, relogio):
    dto = beneficiario_service.criar(perfil_id, "AZUL", "Ana Maria", gerar_cpf(1), "2025-01-10")
    novo = beneficiario_service.editar(dto.id, cpf=gerar_cpf(2))
    relogio.avancar(30)

    registros = beneficiario_service.listar_com_status(perfil_id)

    assert [(b.id, b.status, b.cpf_anterior) for b in registros] == [(novo.id, "UTILIZADO", None)]


def test_excluir(beneficiario_service, perfil_id, gerar_cpf):
    dto = beneficiario_service.criar(perfil_id, "LATAM", "Ana Maria", gerar_cpf(1), "2025-01-10")
    beneficiario_service.excluir(dto.id, usuario_id=USUARIO)
    assert beneficiario_service.listar_com_status(perfil_id) == []
    with pytest.raises(ErroNaoEncontrado):
        beneficiario_service.excluir(dto.id)


def test_excluir_por_programa(beneficiario_service, perfil_id, gerar_cpf):
    for i in range(3):
        beneficiario_service.criar(perfil_id, "SMILES", "Pessoa Smiles", gerar_cpf(i), "2025-01-10")
    beneficiario_service.criar(perfil_id, "LATAM", "Pessoa Latam", gerar_cpf(9), "2025-01-10")

    assert beneficiario_service.excluir_por_programa(perfil_id, "SMILES") == 3
    assert [b.programa for b in beneficiario_service.listar_com_status(perfil_id)] == ["LATAM"]
