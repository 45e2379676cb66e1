from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from company_profile import CompanyProfile, normalize_company_profile
from dto import ProLaboreAnalysis, ScenarioInput, ScenarioResult, TaxLine
from eligibility_engine import (
    elegibilidade_equiparacao_hospitalar,
    elegibilidade_simples,
    elegibilidade_uniprofissional,
)
from fator_r import resolver_fator_r, pro_labore_alvo
from formatters import formatar_percentual, formatar_reais
from legal_constants import LegalConstants, load_legal_constants
from payroll import analisar_pro_labore, calcular_cpp
from pessoa_fisica import calcular_carne_leao, calcular_clt
from regime_comparator import rank_scenarios
from regime_utils import (
    REGIME_DISPLAY_CARNE_LEAO,
    REGIME_DISPLAY_CLT,
    REGIME_DISPLAY_MEI,
    REGIME_DISPLAY_PRESUMIDO,
    REGIME_DISPLAY_REAL,
    RegimeKind,
    ScenarioCategory,
)
from regimes import (
    calcular_lucro_presumido_misto,
    calcular_lucro_real,
    calcular_mei,
    calcular_simples_misto,
    nome_simples,
)
from report_formatters import render_relatorio_cenarios

logger = logging.getLogger(__name__)

NOME_PRESUMIDO_HOSPITALAR = "Lucro Presumido Equiparação Hospitalar"
NOME_PRESUMIDO_SUP = "Lucro Presumido Uniprofissional (ISS Fixo)"


@dataclass(frozen=True)
class ScenarioOutput:
    profile: CompanyProfile
    cenarios: List[ScenarioResult]
    relatorio_texto: str

    def to_event(self) -> Dict[str, Any]:
        return {
            "ruleset_id": self.profile.ruleset_id,
            "receita_mensal": self.profile.receita_mensal,
            "rbt12": self.profile.rbt12,
            "assumptions": list(self.profile.assumptions),
            "cenarios": [c.to_dict() for c in self.cenarios],
        }


class ScenarioService:
    """
    Service Layer: normaliza input -> calcula cada regime -> ranking.
    UI (CLI/Streamlit) apenas coleta inputs e exibe outputs.
    """

    def __init__(self, constantes: Optional[LegalConstants] = None) -> None:
        self._constantes = constantes

    def _constantes_para(self, inp: ScenarioInput) -> LegalConstants:
        if self._constantes is not None:
            return self._constantes
        return load_legal_constants(inp.ruleset_id)

    @staticmethod
    def _aliquota_efetiva(imposto: float, receita: float) -> float:
        if receita <= 0:
            return 0.0
        return (imposto / receita) * 100.0

    @staticmethod
    def _lucro_distribuivel(
        profile: CompanyProfile,
        imposto: float,
        pro_labore: Optional[ProLaboreAnalysis] = None,
    ) -> float:
        liquido_pro_labore = pro_labore.valor_liquido if pro_labore is not None else 0.0
        return profile.receita_mensal - profile.folha_pagamento - imposto - liquido_pro_labore

    @staticmethod
    def _linhas_pro_labore(pro_labore: ProLaboreAnalysis) -> List[TaxLine]:
        return [
            TaxLine(descricao="INSS Pró-labore", aliquota_percentual=0.0, valor=pro_labore.valor_inss),
            TaxLine(descricao="IRRF Pró-labore", aliquota_percentual=0.0, valor=pro_labore.valor_irrf),
        ]

    def _resultado(
        self,
        profile: CompanyProfile,
        *,
        nome: str,
        categoria: ScenarioCategory,
        tipo_regime: RegimeKind,
        elegivel: bool,
        nota: str,
        tributos: List[TaxLine],
        observacoes: str,
        pro_labore: Optional[ProLaboreAnalysis] = None,
        lucro_liquido: Optional[float] = None,
        detalhes: Optional[Dict[str, Any]] = None,
    ) -> ScenarioResult:
        imposto = sum(t.valor for t in tributos)
        if lucro_liquido is None:
            lucro_liquido = self._lucro_distribuivel(profile, imposto, pro_labore)
        logger.debug("cenário %s: imposto_total=%.2f elegivel=%s", nome, imposto, elegivel)
        return ScenarioResult(
            nome=nome,
            categoria=categoria,
            tipo_regime=tipo_regime,
            elegivel=elegivel,
            nota_elegibilidade=nota,
            imposto_total=imposto,
            aliquota_efetiva_percentual=self._aliquota_efetiva(imposto, profile.receita_mensal),
            lucro_liquido_distribuivel=lucro_liquido,
            tributos=tuple(tributos),
            analise_pro_labore=pro_labore,
            observacoes=observacoes,
            detalhes=dict(detalhes or {}),
        )

    @staticmethod
    def _sem_tributos(detalhes: Dict[str, Any]) -> Dict[str, Any]:
        return {k: v for k, v in detalhes.items() if k != "tributos"}

    # ------------------------------------------------------------------
    # PF
    # ------------------------------------------------------------------

    def _cenario_carne_leao(self, profile: CompanyProfile, c: LegalConstants) -> ScenarioResult:
        _, detalhes = calcular_carne_leao(profile.receita_mensal, profile.folha_pagamento, c)
        return self._resultado(
            profile,
            nome=REGIME_DISPLAY_CARNE_LEAO,
            categoria=ScenarioCategory.PF,
            tipo_regime=RegimeKind.CARNE_LEAO,
            elegivel=True,
            nota="Disponível para qualquer profissional autônomo.",
            tributos=detalhes["tributos"],
            observacoes="INSS Autônomo 20% + IRPF progressivo. Geralmente a opção mais onerosa.",
            detalhes=self._sem_tributos(detalhes),
        )

    def _cenario_clt(self, profile: CompanyProfile, c: LegalConstants) -> ScenarioResult:
        _, detalhes = calcular_clt(profile.receita_mensal, c)
        return self._resultado(
            profile,
            nome=REGIME_DISPLAY_CLT,
            categoria=ScenarioCategory.PF,
            tipo_regime=RegimeKind.CLT,
            elegivel=True,
            nota="Para comparação: caso fosse contratado como empregado.",
            tributos=detalhes["tributos"],
            observacoes=(
                f"Custo total para empresa: {formatar_reais(detalhes['custo_total_empresa'])}. "
                "Inclui INSS patronal, FGTS, RAT e terceiros."
            ),
            lucro_liquido=detalhes["salario_liquido"],
            detalhes=self._sem_tributos(detalhes),
        )

    # ------------------------------------------------------------------
    # PJ
    # ------------------------------------------------------------------

    def _cenario_mei(self, profile: CompanyProfile, c: LegalConstants) -> ScenarioResult:
        _, detalhes = calcular_mei(profile.receita_anual_projetada, profile.atividades, c)
        return self._resultado(
            profile,
            nome=REGIME_DISPLAY_MEI,
            categoria=ScenarioCategory.PJ,
            tipo_regime=RegimeKind.MEI,
            elegivel=detalhes["elegivel"],
            nota=detalhes["nota_elegibilidade"],
            tributos=detalhes["tributos"],
            observacoes="Custo fixo mensal (DAS-MEI), independente do faturamento.",
            detalhes=self._sem_tributos(detalhes),
        )

    def _cenario_simples(self, profile: CompanyProfile, c: LegalConstants) -> ScenarioResult:
        fator_r = resolver_fator_r(profile.folha_pagamento, profile.receita_mensal, c)
        _, detalhes = calcular_simples_misto(profile.rbt12, profile.atividades, fator_r, c)
        pro_labore = analisar_pro_labore(pro_labore_alvo(profile.receita_mensal, c), c)

        tributos = list(detalhes["tributos"]) + self._linhas_pro_labore(pro_labore)
        if "IV" in detalhes["anexos"]:
            # DAS do Anexo IV nao inclui a CPP
            tributos.append(
                TaxLine(
                    descricao="CPP Patronal (Anexo IV)",
                    aliquota_percentual=c.aliquota_cpp * 100.0,
                    valor=calcular_cpp(pro_labore.valor_base, c),
                )
            )

        elegibilidade = elegibilidade_simples(profile.rbt12, c)
        situacao_fator_r = "≥" if fator_r.qualifica_anexo_iii else "<"
        observacoes = (
            f"Fator R atual: {formatar_percentual(fator_r.razao)} {situacao_fator_r} "
            f"{formatar_percentual(c.fator_r_limite, casas=0)}. "
            f"Considera pró-labore de {formatar_reais(pro_labore.valor_base)} "
            f"({formatar_percentual(c.fator_r_limite, casas=0)} da receita, mínimo 1 salário mínimo)."
        )
        return self._resultado(
            profile,
            nome=nome_simples(detalhes["anexos"]),
            categoria=ScenarioCategory.PJ,
            tipo_regime=RegimeKind.SIMPLES_MIXED if detalhes["misto"] else RegimeKind.SIMPLES_SINGLE,
            elegivel=elegibilidade.elegivel,
            nota=elegibilidade.nota,
            tributos=tributos,
            observacoes=observacoes,
            pro_labore=pro_labore,
            detalhes=self._sem_tributos(detalhes),
        )

    def _encargos_pro_labore_minimo(self, c: LegalConstants) -> Tuple[ProLaboreAnalysis, List[TaxLine]]:
        pro_labore = analisar_pro_labore(c.salario_minimo, c)
        linhas = [
            TaxLine(
                descricao="CPP Patronal",
                aliquota_percentual=c.aliquota_cpp * 100.0,
                valor=calcular_cpp(c.salario_minimo, c),
            )
        ] + self._linhas_pro_labore(pro_labore)
        return pro_labore, linhas

    def _presumido(
        self,
        profile: CompanyProfile,
        c: LegalConstants,
        *,
        equiparacao_hospitalar: bool,
        sociedade_uniprofissional: bool,
    ) -> Tuple[Dict[str, Any], ProLaboreAnalysis, List[TaxLine]]:
        _, detalhes = calcular_lucro_presumido_misto(
            profile.atividades,
            c,
            profile.aliquota_iss,
            profile.aliquota_icms,
            equiparacao_hospitalar=equiparacao_hospitalar,
            iss_fixo_mensal=profile.iss_fixo_mensal if sociedade_uniprofissional else None,
            pis_cofins_monofasico=profile.pis_cofins_monofasico,
        )
        pro_labore, linhas_folha = self._encargos_pro_labore_minimo(c)
        return detalhes, pro_labore, list(detalhes["tributos"]) + linhas_folha

    def _cenarios_presumido(self, profile: CompanyProfile, c: LegalConstants) -> List[ScenarioResult]:
        detalhes, pro_labore, tributos = self._presumido(
            profile,
            c,
            equiparacao_hospitalar=profile.equiparacao_hospitalar,
            sociedade_uniprofissional=profile.sociedade_uniprofissional,
        )
        misto = detalhes["misto"]
        tipo_regime = RegimeKind.PRESUMED_MIXED if misto else RegimeKind.PRESUMED
        nome = f"{REGIME_DISPLAY_PRESUMIDO} (Misto)" if misto else REGIME_DISPLAY_PRESUMIDO

        observacoes: List[str] = ["Bases de presunção somadas por atividade. Inclui CPP sobre pró-labore mínimo."]
        if profile.equiparacao_hospitalar:
            observacoes.append("Equiparação hospitalar aplicada: presunção IRPJ 8% / CSLL 12% nos serviços.")
        if profile.sociedade_uniprofissional:
            observacoes.append(
                f"ISS Fixo: {formatar_reais(profile.iss_fixo_mensal)}/mês ({profile.numero_socios} sócio(s))."
            )
        if profile.pis_cofins_monofasico:
            observacoes.append("PIS/COFINS monofásico: revenda de comércio/indústria sem PIS/COFINS.")

        cenarios = [
            self._resultado(
                profile,
                nome=nome,
                categoria=ScenarioCategory.PJ,
                tipo_regime=tipo_regime,
                elegivel=True,
                nota=f"Limite de faturamento não validado. ISS: {formatar_percentual(profile.aliquota_iss, ja_percentual=True)}.",
                tributos=tributos,
                observacoes=" ".join(observacoes),
                pro_labore=pro_labore,
                detalhes=self._sem_tributos(detalhes),
            )
        ]

        if detalhes["receita_servico"] <= 0:
            return cenarios

        # Simulacoes com o beneficio ligado, inelegiveis enquanto o requisito nao for atendido
        if not profile.equiparacao_hospitalar:
            det_h, pl_h, trib_h = self._presumido(
                profile,
                c,
                equiparacao_hospitalar=True,
                sociedade_uniprofissional=profile.sociedade_uniprofissional,
            )
            elegibilidade = elegibilidade_equiparacao_hospitalar(False)
            cenarios.append(
                self._resultado(
                    profile,
                    nome=NOME_PRESUMIDO_HOSPITALAR,
                    categoria=ScenarioCategory.PJ,
                    tipo_regime=tipo_regime,
                    elegivel=elegibilidade.elegivel,
                    nota=elegibilidade.nota,
                    tributos=trib_h,
                    observacoes="Base de presunção reduzida: IRPJ 8%, CSLL 12%. Requer documentação ANVISA.",
                    pro_labore=pl_h,
                    detalhes=self._sem_tributos(det_h),
                )
            )
        if not profile.sociedade_uniprofissional:
            det_s, pl_s, trib_s = self._presumido(
                profile,
                c,
                equiparacao_hospitalar=profile.equiparacao_hospitalar,
                sociedade_uniprofissional=True,
            )
            economia = detalhes["iss"] - det_s["iss"]
            elegibilidade = elegibilidade_uniprofissional(False)
            cenarios.append(
                self._resultado(
                    profile,
                    nome=NOME_PRESUMIDO_SUP,
                    categoria=ScenarioCategory.PJ,
                    tipo_regime=tipo_regime,
                    elegivel=elegibilidade.elegivel,
                    nota=elegibilidade.nota,
                    tributos=trib_s,
                    observacoes=(
                        f"ISS Fixo: {formatar_reais(profile.iss_fixo_mensal)}/mês ({profile.numero_socios} sócio(s)). "
                        f"Economia vs ISS variável: {formatar_reais(economia)}/mês."
                    ),
                    pro_labore=pl_s,
                    detalhes=self._sem_tributos(det_s),
                )
            )
        return cenarios

    def _cenario_real(self, profile: CompanyProfile, c: LegalConstants) -> ScenarioResult:
        _, detalhes = calcular_lucro_real(
            profile.atividades,
            c,
            profile.margem_lucro_real,
            profile.aliquota_iss,
            profile.aliquota_icms,
        )
        pro_labore, linhas_folha = self._encargos_pro_labore_minimo(c)
        return self._resultado(
            profile,
            nome=REGIME_DISPLAY_REAL,
            categoria=ScenarioCategory.PJ,
            tipo_regime=RegimeKind.REAL,
            elegivel=True,
            nota="Obrigatório para faturamento > R$ 78 milhões ou atividades específicas. Vantajoso se margem < 32%.",
            tributos=list(detalhes["tributos"]) + linhas_folha,
            observacoes=(
                f"Estimativa com margem de lucro de {formatar_percentual(profile.margem_lucro_real, casas=0)}. "
                "PIS/COFINS não cumulativo sem créditos."
            ),
            pro_labore=pro_labore,
            detalhes=self._sem_tributos(detalhes),
        )

    # ------------------------------------------------------------------
    # API
    # ------------------------------------------------------------------

    def build_profile(self, inp: ScenarioInput) -> CompanyProfile:
        return normalize_company_profile(inp, self._constantes_para(inp))

    def _cenarios(self, profile: CompanyProfile, c: LegalConstants) -> List[ScenarioResult]:
        cenarios: List[ScenarioResult] = [
            self._cenario_carne_leao(profile, c),
            self._cenario_clt(profile, c),
            self._cenario_mei(profile, c),
            self._cenario_simples(profile, c),
        ]
        cenarios.extend(self._cenarios_presumido(profile, c))
        cenarios.append(self._cenario_real(profile, c))
        return rank_scenarios(cenarios)

    def run(self, inp: ScenarioInput) -> List[ScenarioResult]:
        c = self._constantes_para(inp)
        profile = normalize_company_profile(inp, c)
        return self._cenarios(profile, c)

    def analyze(self, inp: ScenarioInput) -> ScenarioOutput:
        """Como `run`, devolvendo tambem o perfil normalizado e o relatorio em texto."""
        c = self._constantes_para(inp)
        profile = normalize_company_profile(inp, c)
        cenarios = self._cenarios(profile, c)
        return ScenarioOutput(
            profile=profile,
            cenarios=cenarios,
            relatorio_texto=render_relatorio_cenarios(profile, cenarios),
        )


def generate_scenarios(inp: ScenarioInput, constantes: Optional[LegalConstants] = None) -> List[ScenarioResult]:
    return ScenarioService(constantes).run(inp)
