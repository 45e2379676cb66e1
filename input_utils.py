from dto import Activity
from regime_utils import canonicalize_anexo, canonicalize_tipo_atividade, parse_bool


def parse_valor(raw: str) -> float:
    """
    Aceita:
      - 10000
      - 10000,50
      - 10.000,50
      - R$ 10.000,50
    """
    v = (raw or "").strip().replace("R$", "").replace(" ", "")
    if "," in v:
        v = v.replace(".", "").replace(",", ".")
    try:
        return float(v)
    except ValueError:
        raise ValueError(f"Valor inválido: '{raw}'. Ex: 10000 ou 10.000,50") from None


def parse_percentual(raw: str) -> float:
    """
    Aceita:
      - 4
      - 4%
      - 0.04
      - 2,5
    Retorna percentual: 4.0
    """
    v = (raw or "").strip().replace("%", "").replace(",", ".")
    try:
        numero = float(v)
    except ValueError:
        raise ValueError(f"Alíquota inválida: '{raw}'. Exemplos: 4, 4%, 0.04, 2,5") from None
    if numero < 0:
        raise ValueError("A alíquota não pode ser negativa.")
    if 0 < numero < 1:
        numero *= 100
    return numero


def parse_atividade(raw: str) -> Activity:
    """
    Formato NOME:RECEITA:TIPO:ANEXO[:mei]
    Ex.: "Bar:5000:comercio:I:mei"
    """
    partes = [p.strip() for p in (raw or "").split(":")]
    if len(partes) not in (4, 5):
        raise ValueError(f"Atividade inválida: '{raw}'. Use NOME:RECEITA:TIPO:ANEXO[:mei].")
    nome, receita, tipo, anexo = partes[:4]
    elegivel_mei = parse_bool(partes[4]) if len(partes) == 5 else False
    return Activity(
        nome=nome,
        receita=parse_valor(receita),
        tipo=canonicalize_tipo_atividade(tipo),
        anexo_simples=canonicalize_anexo(anexo),
        elegivel_mei=elegivel_mei,
    )
