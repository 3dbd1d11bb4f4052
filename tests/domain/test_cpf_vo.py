# tests/domain/test_cpf_vo.py
import pytest

from fidelidade.domain.beneficiario.value_objects import CPF, NomeBeneficiario


def test_cpf_valido_com_pontuacao():
    cpf = CPF("111.444.777-35")
    assert cpf.valor == "11144477735"


def test_cpf_digito_verificador_invalido():
    with pytest.raises(ValueError, match="CPF invalido"):
        CPF("111.444.777-00")


def test_cpf_todos_iguais_invalido():
    with pytest.raises(ValueError):
        CPF("111.111.111-11")


def test_cpf_comprimento_errado():
    with pytest.raises(ValueError, match="comprimento"):
        CPF("123")


def test_cpf_repr_e_str_nunca_mostram_completo():
    """CPF nunca aparece completo em logs/repr (exigencia LGPD)."""
    cpf = CPF("11144477735")
    assert "11144477735" not in repr(cpf)
    assert str(cpf) == "***.444.777-**"


def test_cpf_igualdade_por_valor():
    a = CPF("11144477735")
    b = CPF("111.444.777-35")
    assert a == b
    assert hash(a) == hash(b)


def test_nome_trimado():
    assert NomeBeneficiario("  Ana Maria  ").valor == "Ana Maria"


def test_nome_com_acento_hifen_apostrofo():
    assert NomeBeneficiario("João D'Ávila-Souza").valor == "João D'Ávila-Souza"


@pytest.mark.parametrize("nome", ["Ana", "A" * 61, "Ana 2", "Ana@Silva"])
def test_nome_invalido(nome: str):
    with pytest.raises(ValueError, match="Nome invalido"):
        NomeBeneficiario(nome)
