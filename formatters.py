def _separadores_br(s: str) -> str:
    # troca separadores estilo US -> BR
    return s.replace(",", "X").replace(".", ",").replace("X", ".")


def formatar_reais(valor: float) -> str:
    numero = round(float(valor), 2)
    if numero == 0:
        numero = 0.0  # evita "R$ -0,00"
    return f"R$ {_separadores_br(f'{numero:,.2f}')}"


def formatar_percentual(valor: float, casas: int = 2, ja_percentual: bool = False) -> str:
    """Formata percentual em pt-BR (ex.: 11,37%)."""
    numero = float(valor)
    if not ja_percentual:
        numero *= 100.0
    return f"{_separadores_br(f'{numero:,.{casas}f}')}%"
