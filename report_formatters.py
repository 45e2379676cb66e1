from __future__ import annotations

from typing import List, Sequence

from company_profile import CompanyProfile
from dto import ScenarioResult
from formatters import formatar_percentual, formatar_reais


def _marcador(cenario: ScenarioResult) -> str:
    if cenario.melhor:
        return " [MELHOR]"
    if cenario.pior:
        return " [PIOR]"
    return ""


def render_perfil_section(profile: CompanyProfile) -> str:
    lines: List[str] = ["=== PERFIL NORMALIZADO ==="]
    lines.append(f"Ruleset: {profile.ruleset_id}")
    lines.append(f"Receita mensal: {formatar_reais(profile.receita_mensal)}")
    lines.append(f"RBT12: {formatar_reais(profile.rbt12)}")
    lines.append(f"Folha de pagamento: {formatar_reais(profile.folha_pagamento)}")
    lines.append(f"ISS: {formatar_percentual(profile.aliquota_iss, ja_percentual=True)}")
    lines.append("Atividades:")
    for atividade in profile.atividades:
        mei = "MEI" if atividade.elegivel_mei else "não MEI"
        lines.append(
            f"- {atividade.nome} | {atividade.tipo} | Anexo {atividade.anexo_simples} | "
            f"{formatar_reais(atividade.receita)} | {mei}"
        )
    if profile.assumptions:
        lines.append("Premissas:")
        for item in profile.assumptions:
            lines.append(f"- {item}")
    return "\n".join(lines)


def render_ranking_section(cenarios: Sequence[ScenarioResult]) -> str:
    lines: List[str] = ["=== RANKING DE CENÁRIOS ==="]
    if not cenarios:
        lines.append("Sem cenários calculados.")
        return "\n".join(lines)

    lines.append("# | Cenário | Elegível | Imposto | Carga Efetiva | Lucro Distribuível")
    lines.append("-------------------------------------------------------------------")
    for idx, cenario in enumerate(cenarios, start=1):
        elegivel = "Sim" if cenario.elegivel else "Não"
        lines.append(
            f"{idx}. {cenario.nome}{_marcador(cenario)} | {elegivel} | "
            f"{formatar_reais(cenario.imposto_total)} | "
            f"{formatar_percentual(cenario.aliquota_efetiva_percentual, ja_percentual=True)} | "
            f"{formatar_reais(cenario.lucro_liquido_distribuivel)}"
        )
    return "\n".join(lines)


def render_cenario_detalhe(cenario: ScenarioResult) -> str:
    lines: List[str] = [f"--- {cenario.nome} ({cenario.categoria.value.upper()}) ---"]
    lines.append(f"Elegibilidade: {cenario.nota_elegibilidade}")
    for tributo in cenario.tributos:
        aliq = (
            f" ({formatar_percentual(tributo.aliquota_percentual, ja_percentual=True)})"
            if tributo.aliquota_percentual
            else ""
        )
        lines.append(f"  {tributo.descricao}{aliq}: {formatar_reais(tributo.valor)}")
    lines.append(f"  Total: {formatar_reais(cenario.imposto_total)}")

    pl = cenario.analise_pro_labore
    if pl is not None:
        lines.append(
            f"  Pró-labore: base {formatar_reais(pl.valor_base)} | INSS {formatar_reais(pl.valor_inss)} | "
            f"IRRF {formatar_reais(pl.valor_irrf)} | líquido {formatar_reais(pl.valor_liquido)}"
        )
    if cenario.observacoes:
        lines.append(f"  Obs.: {cenario.observacoes}")
    return "\n".join(lines)


def render_relatorio_cenarios(profile: CompanyProfile, cenarios: Sequence[ScenarioResult]) -> str:
    partes = [render_perfil_section(profile), render_ranking_section(cenarios)]
    if cenarios:
        partes.append("=== DETALHAMENTO ===\n" + "\n\n".join(render_cenario_detalhe(c) for c in cenarios))
    return "\n\n".join(partes)
