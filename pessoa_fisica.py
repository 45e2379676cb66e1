from __future__ import annotations

from typing import Any, Dict, List, Tuple

from dto import TaxLine
from legal_constants import LegalConstants
from payroll import calcular_inss, calcular_irrf


def calcular_carne_leao(
    receita_mensal: float,
    despesas_dedutiveis: float,
    constantes: LegalConstants,
) -> Tuple[float, Dict[str, Any]]:
    """
    Autonomo pessoa fisica: base = receita - despesas dedutiveis (livro caixa).
    INSS autonomo 20% sobre a receita limitada ao teto; INSS pago e dedutivel do IR.
    """
    base_tributavel = max(0.0, receita_mensal - despesas_dedutiveis)
    base_inss = min(receita_mensal, constantes.teto_inss)
    inss = max(0.0, base_inss) * constantes.aliquota_inss_autonomo
    irpf = calcular_irrf(base_tributavel - inss, constantes)

    tributos: List[TaxLine] = [
        TaxLine(
            descricao="INSS Autônomo",
            aliquota_percentual=constantes.aliquota_inss_autonomo * 100.0,
            valor=inss,
        ),
        TaxLine(descricao="IRPF Progressivo", aliquota_percentual=0.0, valor=irpf),
    ]
    return inss + irpf, {
        "base_tributavel": base_tributavel,
        "base_inss": base_inss,
        "inss": inss,
        "irpf": irpf,
        "tributos": tributos,
    }


def calcular_clt(salario_bruto: float, constantes: LegalConstants) -> Tuple[float, Dict[str, Any]]:
    """Simula a receita paga como salario CLT: retencoes do empregado + encargos do empregador."""
    inss_empregado = calcular_inss(salario_bruto, constantes)
    irrf_empregado = calcular_irrf(salario_bruto - inss_empregado, constantes)
    salario_liquido = salario_bruto - inss_empregado - irrf_empregado

    encargos = constantes.encargos_clt
    base = max(0.0, salario_bruto)
    inss_patronal = base * encargos.inss_patronal
    fgts = base * encargos.fgts
    rat = base * encargos.rat
    terceiros = base * encargos.terceiros
    encargos_empregador = inss_patronal + fgts + rat + terceiros

    tributos: List[TaxLine] = [
        TaxLine(descricao="INSS (Empregado)", aliquota_percentual=0.0, valor=inss_empregado),
        TaxLine(descricao="IRRF", aliquota_percentual=0.0, valor=irrf_empregado),
        TaxLine(descricao="INSS Patronal", aliquota_percentual=encargos.inss_patronal * 100.0, valor=inss_patronal),
        TaxLine(descricao="FGTS", aliquota_percentual=encargos.fgts * 100.0, valor=fgts),
        TaxLine(descricao="RAT", aliquota_percentual=encargos.rat * 100.0, valor=rat),
        TaxLine(descricao="Terceiros (Sistema S)", aliquota_percentual=encargos.terceiros * 100.0, valor=terceiros),
    ]
    return inss_empregado + irrf_empregado + encargos_empregador, {
        "salario_bruto": salario_bruto,
        "salario_liquido": salario_liquido,
        "inss_empregado": inss_empregado,
        "irrf_empregado": irrf_empregado,
        "encargos_empregador": encargos_empregador,
        "custo_total_empresa": salario_bruto + encargos_empregador,
        "tributos": tributos,
    }
