from __future__ import annotations

from typing import Any, Dict, Tuple

from legal_constants import LegalConstants

RECOMENDACAO_COMBINADO = "COMBINADO"
RECOMENDACAO_SEPARADO = "SEPARADO"


def _nao_negativo(valor: float, campo: str) -> float:
    numero = float(valor)
    if numero < 0:
        raise ValueError(f"{campo} não pode ser negativo.")
    return numero


def calcular_icms_st(
    preco_compra: float,
    preco_venda: float,
    aliquota_icms_interna: float,
    mva_percentual: float,
) -> Tuple[float, Dict[str, Any]]:
    """
    ICMS-ST embutido no preco de compra (recolhido pelo fabricante):
    base ST = compra x (1 + MVA); ST = base ST x aliquota interna - ICMS proprio.
    Aliquota e MVA em percentual.
    """
    compra = _nao_negativo(preco_compra, "preco_compra")
    venda = _nao_negativo(preco_venda, "preco_venda")
    aliquota = _nao_negativo(aliquota_icms_interna, "aliquota_icms_interna") / 100.0
    mva = _nao_negativo(mva_percentual, "mva_percentual") / 100.0

    base_st = compra * (1 + mva)
    icms_proprio = compra * aliquota
    st_embutido = base_st * aliquota - icms_proprio
    margem_bruta = venda - compra
    return st_embutido, {
        "base_st": base_st,
        "icms_total": base_st * aliquota,
        "icms_proprio": icms_proprio,
        "margem_bruta": margem_bruta,
        "margem_liquida_apos_icms": margem_bruta - st_embutido,
    }


def calcular_difal(valor_compra: float, aliquota_origem: float, aliquota_destino: float) -> float:
    # Sem DIFAL quando a interestadual ja e maior ou igual a interna
    diferenca = max(0.0, float(aliquota_destino) - float(aliquota_origem))
    return _nao_negativo(valor_compra, "valor_compra") * diferenca / 100.0


def calcular_margem_bomba(
    custo_litro: float,
    preco_litro: float,
    icms_litro: float,
    constantes: LegalConstants,
    etanol: bool = False,
) -> Dict[str, Any]:
    """
    Margem por litro do posto. ICMS ad rem por litro; CIDE so para gasolina/diesel.
    PIS/COFINS e monofasico (pago na refinaria), zero na revenda.
    """
    custo = _nao_negativo(custo_litro, "custo_litro")
    preco = _nao_negativo(preco_litro, "preco_litro")
    icms = _nao_negativo(icms_litro, "icms_litro")
    cide = 0.0 if etanol else constantes.varejo.cide_por_litro
    pis_cofins = 0.0

    margem_bruta = preco - custo
    margem_liquida = margem_bruta - icms - cide - pis_cofins
    return {
        "margem_bruta": margem_bruta,
        "icms": icms,
        "cide": cide,
        "pis_cofins": pis_cofins,
        "margem_liquida": margem_liquida,
        "margem_liquida_percentual": (margem_liquida / preco) * 100.0 if preco > 0 else 0.0,
    }


def analisar_loja_conveniencia(
    receita_combustivel: float,
    receita_loja: float,
    constantes: LegalConstants,
) -> Dict[str, Any]:
    """
    Posto com loja de conveniencia: mesmo CNPJ (tudo no Presumido, loja com presuncao de servico)
    versus CNPJs separados (loja no Simples Anexo I, primeira faixa).
    """
    combustivel = _nao_negativo(receita_combustivel, "receita_combustivel")
    loja = _nao_negativo(receita_loja, "receita_loja")
    receita_total = combustivel + loja

    p = constantes.presumido
    presuncao_servico = p.presuncao["servico"]
    aliquota_loja_presumido = (p.pis + p.cofins) + presuncao_servico.irpj * p.irpj + presuncao_servico.csll * p.csll
    aliquota_loja_simples = constantes.anexo("I").primeira.aliquota_nominal
    imposto_combustivel = combustivel * constantes.varejo.aliquota_combustivel_presumido

    def efetiva(total: float) -> float:
        return (total / receita_total) * 100.0 if receita_total > 0 else 0.0

    loja_combinado = loja * aliquota_loja_presumido
    total_combinado = imposto_combustivel + loja_combinado
    loja_separado = loja * aliquota_loja_simples
    total_separado = imposto_combustivel + loja_separado
    economia = total_combinado - total_separado

    return {
        "combinado": {
            "imposto_combustivel": imposto_combustivel,
            "imposto_loja": loja_combinado,
            "imposto_total": total_combinado,
            "aliquota_efetiva_percentual": efetiva(total_combinado),
        },
        "separado": {
            "imposto_combustivel": imposto_combustivel,
            "imposto_loja": loja_separado,
            "imposto_total": total_separado,
            "aliquota_efetiva_percentual": efetiva(total_separado),
        },
        "economia": max(0.0, economia),
        "recomendacao": RECOMENDACAO_SEPARADO if economia > 0 else RECOMENDACAO_COMBINADO,
    }
