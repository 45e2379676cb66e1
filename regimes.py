from __future__ import annotations

from dataclasses import replace
from typing import Any, Dict, List, Optional, Sequence, Tuple

from bracket_evaluator import escolher_faixa, imposto_progressivo
from dto import Activity, TaxLine
from eligibility_engine import elegibilidade_mei
from fator_r import FatorR, anexo_ajustado
from legal_constants import Faixa, LegalConstants, TabelaProgressiva
from regime_utils import ANEXOS_VALIDOS, canonicalize_tipo_atividade, is_comercio_ou_industria, is_servico


def _ordenar_anexos(anexos: Sequence[str]) -> List[str]:
    return sorted(set(anexos), key=ANEXOS_VALIDOS.index)


def _com_tipo_canonico(atividades: Sequence[Activity]) -> List[Activity]:
    return [replace(a, tipo=canonicalize_tipo_atividade(a.tipo)) for a in atividades]


def _receita_por_grupo(atividades: Sequence[Activity]) -> Tuple[float, float]:
    servico = sum(a.receita for a in atividades if is_servico(a.tipo))
    comercio_industria = sum(a.receita for a in atividades if is_comercio_ou_industria(a.tipo))
    return servico, comercio_industria


# ----------------------------------------------------------------------
# MEI
# ----------------------------------------------------------------------


def calcular_mei(
    receita_anual_projetada: float,
    atividades: Sequence[Activity],
    constantes: LegalConstants,
) -> Tuple[float, Dict[str, Any]]:
    """
    Custo fixo mensal do MEI (independe do faturamento): INSS 5% do salario minimo,
    + ICMS fixo se houver comercio/industria, + ISS fixo se houver servico.
    Sempre calcula; inelegibilidade volta nos detalhes.
    """
    mei = constantes.mei
    atividades = _com_tipo_canonico(atividades)
    tributos: List[TaxLine] = [
        TaxLine(descricao="INSS (5% salário mínimo)", aliquota_percentual=5.0, valor=mei.inss),
    ]
    if any(is_comercio_ou_industria(a.tipo) for a in atividades):
        tributos.append(TaxLine(descricao="ICMS (fixo)", aliquota_percentual=0.0, valor=mei.icms))
    if any(is_servico(a.tipo) for a in atividades):
        tributos.append(TaxLine(descricao="ISS (fixo)", aliquota_percentual=0.0, valor=mei.iss))

    imposto = sum(t.valor for t in tributos)
    elegibilidade = elegibilidade_mei(receita_anual_projetada, atividades, constantes)
    return imposto, {
        "elegivel": elegibilidade.elegivel,
        "nota_elegibilidade": elegibilidade.nota,
        "motivos": list(elegibilidade.reasons),
        "receita_anual_projetada": receita_anual_projetada,
        "limite_anual": mei.limite_anual,
        "tributos": tributos,
    }


# ----------------------------------------------------------------------
# Simples Nacional
# ----------------------------------------------------------------------


def aliquota_efetiva_simples(rbt12: float, tabela: TabelaProgressiva) -> Tuple[float, Faixa, int]:
    """Aliquota efetiva: (RBT12*AliqNom - PD) / RBT12. Sem RBT12 (empresa nova) usa a nominal da 1a faixa."""
    if rbt12 <= 0:
        return tabela.primeira.aliquota_nominal, tabela.primeira, 1
    faixa, idx = escolher_faixa(rbt12, tabela)
    return imposto_progressivo(rbt12, tabela) / rbt12, faixa, idx


def calcular_simples(
    rbt12: float,
    receita_mensal: float,
    anexo: str,
    constantes: LegalConstants,
) -> Tuple[float, Dict[str, Any]]:
    tabela = constantes.anexo(anexo)
    aliq_efetiva, faixa, idx = aliquota_efetiva_simples(rbt12, tabela)
    imposto = receita_mensal * aliq_efetiva
    return imposto, {
        "anexo": anexo,
        "faixa": idx,
        "rbt12": rbt12,
        "receita_mensal": receita_mensal,
        "aliquota_nominal_percentual": faixa.aliquota_nominal * 100.0,
        "aliquota_efetiva_percentual": aliq_efetiva * 100.0,
        "parcela_deduzir": faixa.parcela_deduzir,
    }


def calcular_simples_misto(
    rbt12: float,
    atividades: Sequence[Activity],
    fator_r: FatorR,
    constantes: LegalConstants,
) -> Tuple[float, Dict[str, Any]]:
    """
    Segregacao de receitas: cada atividade usa o anexo ajustado pelo Fator R e a propria receita,
    mas a faixa e escolhida pelo RBT12 da empresa inteira.
    """
    if not atividades:
        raise ValueError("Simples misto requer ao menos uma atividade.")
    if rbt12 <= 0:
        rbt12 = sum(a.receita for a in atividades) * 12

    por_atividade: List[Dict[str, Any]] = []
    tributos: List[TaxLine] = []
    anexos_aplicados: List[str] = []
    imposto_total = 0.0
    for atividade in atividades:
        anexo = anexo_ajustado(atividade.anexo_simples, fator_r)
        imposto, detalhes = calcular_simples(rbt12, atividade.receita, anexo, constantes)
        detalhes["atividade"] = atividade.nome
        detalhes["anexo_declarado"] = atividade.anexo_simples
        por_atividade.append(detalhes)
        anexos_aplicados.append(anexo)
        imposto_total += imposto
        tributos.append(
            TaxLine(
                descricao=f"DAS Anexo {anexo} ({atividade.nome})",
                aliquota_percentual=detalhes["aliquota_efetiva_percentual"],
                valor=imposto,
            )
        )

    anexos = _ordenar_anexos(anexos_aplicados)
    misto = len(anexos) > 1
    if not misto:
        # Anexo unico: uma linha de DAS consolidada
        receita = sum(a.receita for a in atividades)
        aliquota = (imposto_total / receita) * 100.0 if receita > 0 else por_atividade[0]["aliquota_efetiva_percentual"]
        tributos = [TaxLine(descricao=f"DAS (Anexo {anexos[0]})", aliquota_percentual=aliquota, valor=imposto_total)]

    return imposto_total, {
        "rbt12": rbt12,
        "anexos": anexos,
        "misto": misto,
        "por_atividade": por_atividade,
        "fator_r": fator_r.razao,
        "fator_r_qualifica_anexo_iii": fator_r.qualifica_anexo_iii,
        "tributos": tributos,
    }


def nome_simples(anexos: Sequence[str]) -> str:
    if len(anexos) > 1:
        return f"Simples Nacional (Misto: Anexos {' + '.join(anexos)})"
    return f"Simples Nacional Anexo {anexos[0]}"


# ----------------------------------------------------------------------
# Lucro Presumido
# ----------------------------------------------------------------------


def _presuncao_atividade(atividade: Activity, constantes: LegalConstants, equiparacao_hospitalar: bool):
    tipo = canonicalize_tipo_atividade(atividade.tipo)
    if is_servico(tipo):
        chave = "hospitalar" if equiparacao_hospitalar else "servico"
    else:
        chave = tipo
    return constantes.presumido.presuncao[chave]


def _irpj_com_adicional(base: float, irpj: float, adicional: float, limite: float) -> Tuple[float, float]:
    return base * irpj, max(0.0, base - limite) * adicional


def calcular_lucro_presumido_misto(
    atividades: Sequence[Activity],
    constantes: LegalConstants,
    aliquota_iss: float,
    aliquota_icms: float,
    equiparacao_hospitalar: bool = False,
    iss_fixo_mensal: Optional[float] = None,
    pis_cofins_monofasico: bool = False,
) -> Tuple[float, Dict[str, Any]]:
    """
    Presumido com segregacao por atividade. Bases de IRPJ e CSLL sao somadas entre atividades
    antes de aplicar aliquotas e o adicional de IRPJ (limite mensal sobre a base agregada).
    `iss_fixo_mensal` informado substitui o ISS percentual (Sociedade Uniprofissional).
    Com `pis_cofins_monofasico`, a revenda de comercio/industria nao recolhe PIS/COFINS
    (tributo concentrado no fabricante/importador).
    """
    p = constantes.presumido
    atividades = _com_tipo_canonico(atividades)
    receita = sum(a.receita for a in atividades)
    receita_servico, receita_comercio = _receita_por_grupo(atividades)
    receita_pis_cofins = receita - receita_comercio if pis_cofins_monofasico else receita

    base_irpj = 0.0
    base_csll = 0.0
    for atividade in atividades:
        presuncao = _presuncao_atividade(atividade, constantes, equiparacao_hospitalar)
        base_irpj += atividade.receita * presuncao.irpj
        base_csll += atividade.receita * presuncao.csll

    pis_cofins = receita_pis_cofins * (p.pis + p.cofins)
    irpj, adicional = _irpj_com_adicional(base_irpj, p.irpj, p.adicional_irpj, p.limite_adicional_irpj_mensal)
    csll = base_csll * p.csll

    tributos: List[TaxLine] = [
        TaxLine(
            descricao="PIS/COFINS (Monofásico na revenda)" if pis_cofins_monofasico else "PIS/COFINS",
            aliquota_percentual=(p.pis + p.cofins) * 100.0,
            valor=pis_cofins,
        ),
        TaxLine(descricao="IRPJ", aliquota_percentual=p.irpj * 100.0, valor=irpj),
    ]
    if adicional > 0:
        tributos.append(
            TaxLine(descricao="Adicional IRPJ", aliquota_percentual=p.adicional_irpj * 100.0, valor=adicional)
        )
    tributos.append(TaxLine(descricao="CSLL", aliquota_percentual=p.csll * 100.0, valor=csll))

    iss = 0.0
    if receita_servico > 0:
        if iss_fixo_mensal is not None:
            iss = iss_fixo_mensal
            tributos.append(TaxLine(descricao="ISS Fixo (SUP)", aliquota_percentual=0.0, valor=iss))
        else:
            iss = receita_servico * aliquota_iss / 100.0
            tributos.append(TaxLine(descricao="ISS", aliquota_percentual=aliquota_iss, valor=iss))

    icms = 0.0
    if receita_comercio > 0:
        icms = receita_comercio * aliquota_icms / 100.0
        tributos.append(TaxLine(descricao="ICMS", aliquota_percentual=aliquota_icms, valor=icms))

    imposto = pis_cofins + irpj + adicional + csll + iss + icms
    tem_servico = any(is_servico(a.tipo) for a in atividades)
    tem_comercio = any(is_comercio_ou_industria(a.tipo) for a in atividades)
    return imposto, {
        "receita_mensal": receita,
        "receita_servico": receita_servico,
        "receita_comercio_industria": receita_comercio,
        "base_irpj": base_irpj,
        "base_csll": base_csll,
        "pis_cofins": pis_cofins,
        "pis_cofins_monofasico": pis_cofins_monofasico,
        "irpj": irpj,
        "adicional_irpj": adicional,
        "csll": csll,
        "iss": iss,
        "icms": icms,
        "iss_fixo": iss_fixo_mensal is not None,
        "equiparacao_hospitalar": equiparacao_hospitalar,
        "misto": tem_servico and tem_comercio,
        "tributos": tributos,
    }


def calcular_lucro_presumido(
    receita_mensal: float,
    tipo: str,
    constantes: LegalConstants,
    aliquota_iss: float,
    aliquota_icms: float = 0.0,
    equiparacao_hospitalar: bool = False,
    iss_fixo_mensal: Optional[float] = None,
    pis_cofins_monofasico: bool = False,
) -> Tuple[float, Dict[str, Any]]:
    tipo = canonicalize_tipo_atividade(tipo)
    atividade = Activity(nome=tipo, receita=receita_mensal, tipo=tipo, anexo_simples="III")
    return calcular_lucro_presumido_misto(
        [atividade],
        constantes,
        aliquota_iss,
        aliquota_icms,
        equiparacao_hospitalar=equiparacao_hospitalar,
        iss_fixo_mensal=iss_fixo_mensal,
        pis_cofins_monofasico=pis_cofins_monofasico,
    )


# ----------------------------------------------------------------------
# Lucro Real (estimativa por margem)
# ----------------------------------------------------------------------


def calcular_lucro_real(
    atividades: Sequence[Activity],
    constantes: LegalConstants,
    margem_lucro: float,
    aliquota_iss: float,
    aliquota_icms: float,
) -> Tuple[float, Dict[str, Any]]:
    """Estimativa: IRPJ/CSLL sobre receita x margem; PIS/COFINS nao cumulativo sem creditos."""
    r = constantes.real
    atividades = _com_tipo_canonico(atividades)
    receita = sum(a.receita for a in atividades)
    receita_servico, receita_comercio = _receita_por_grupo(atividades)

    lucro_estimado = receita * margem_lucro
    pis_cofins = receita * (r.pis + r.cofins)
    irpj, adicional = _irpj_com_adicional(lucro_estimado, r.irpj, r.adicional_irpj, r.limite_adicional_irpj_mensal)
    csll = lucro_estimado * r.csll
    iss = receita_servico * aliquota_iss / 100.0
    icms = receita_comercio * aliquota_icms / 100.0

    tributos: List[TaxLine] = [
        TaxLine(
            descricao="PIS/COFINS (Não Cumulativo)", aliquota_percentual=(r.pis + r.cofins) * 100.0, valor=pis_cofins
        ),
        TaxLine(descricao="IRPJ", aliquota_percentual=r.irpj * 100.0, valor=irpj),
    ]
    if adicional > 0:
        tributos.append(
            TaxLine(descricao="Adicional IRPJ", aliquota_percentual=r.adicional_irpj * 100.0, valor=adicional)
        )
    tributos.append(TaxLine(descricao="CSLL", aliquota_percentual=r.csll * 100.0, valor=csll))
    if receita_servico > 0:
        tributos.append(TaxLine(descricao="ISS", aliquota_percentual=aliquota_iss, valor=iss))
    if receita_comercio > 0:
        tributos.append(TaxLine(descricao="ICMS", aliquota_percentual=aliquota_icms, valor=icms))

    imposto = pis_cofins + irpj + adicional + csll + iss + icms
    return imposto, {
        "receita_mensal": receita,
        "margem_lucro": margem_lucro,
        "lucro_estimado": lucro_estimado,
        "pis_cofins": pis_cofins,
        "irpj": irpj,
        "adicional_irpj": adicional,
        "csll": csll,
        "iss": iss,
        "icms": icms,
        "tributos": tributos,
    }
