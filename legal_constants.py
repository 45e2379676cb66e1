from __future__ import annotations

import math
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple

from ruleset_loader import (
    get_mei_params,
    get_payroll_tables,
    get_presumido_params,
    get_real_params,
    get_simples_tables,
    get_varejo_params,
    load_ruleset,
    resolve_ruleset_id,
)

ANEXOS_SIMPLES = ("I", "II", "III", "IV", "V")
PRESUNCAO_CHAVES = ("servico", "comercio", "industria", "hospitalar")


@dataclass(frozen=True)
class Faixa:
    limite_superior: float
    aliquota_nominal: float
    parcela_deduzir: float


@dataclass(frozen=True)
class TabelaProgressiva:
    nome: str
    faixas: Tuple[Faixa, ...]

    @property
    def primeira(self) -> Faixa:
        return self.faixas[0]


@dataclass(frozen=True)
class EncargosClt:
    inss_patronal: float
    fgts: float
    rat: float
    terceiros: float

    @property
    def total(self) -> float:
        return self.inss_patronal + self.fgts + self.rat + self.terceiros


@dataclass(frozen=True)
class ParametrosMei:
    limite_anual: float
    inss: float
    icms: float
    iss: float


@dataclass(frozen=True)
class Presuncao:
    irpj: float
    csll: float


@dataclass(frozen=True)
class ParametrosPresumido:
    pis: float
    cofins: float
    irpj: float
    adicional_irpj: float
    limite_adicional_irpj_mensal: float
    csll: float
    presuncao: Mapping[str, Presuncao]


@dataclass(frozen=True)
class ParametrosReal:
    pis: float
    cofins: float
    irpj: float
    adicional_irpj: float
    limite_adicional_irpj_mensal: float
    csll: float


@dataclass(frozen=True)
class ParametrosVarejo:
    cide_por_litro: float
    aliquota_combustivel_presumido: float


@dataclass(frozen=True)
class Padroes:
    aliquota_iss_percentual: float
    aliquota_icms_percentual: float
    margem_lucro_real: float
    iss_fixo_mensal_por_socio: float
    numero_socios: int


@dataclass(frozen=True)
class LegalConstants:
    """Snapshot imutavel de um ruleset fiscal. Injetado nas calculadoras, nunca lido de estado global."""

    ruleset_id: str
    ano_fiscal: int
    salario_minimo: float
    teto_inss: float
    contribuicao_teto_inss: float
    deducao_dependente: float
    aliquota_cpp: float
    aliquota_inss_autonomo: float
    encargos_clt: EncargosClt
    tabela_inss: TabelaProgressiva
    tabela_irpf: TabelaProgressiva
    anexos_simples: Mapping[str, TabelaProgressiva]
    limite_simples: float
    fator_r_limite: float
    mei: ParametrosMei
    presumido: ParametrosPresumido
    real: ParametrosReal
    varejo: ParametrosVarejo
    padroes: Padroes

    def anexo(self, anexo: str) -> TabelaProgressiva:
        if anexo not in self.anexos_simples:
            raise ValueError(f"Anexo do Simples desconhecido: {anexo}")
        return self.anexos_simples[anexo]


_CONSTANTS_CACHE: Dict[str, LegalConstants] = {}


def _ruleset_error(ruleset_id: str, arquivo: str, chave: str, impacto: str, detalhe: str) -> ValueError:
    return ValueError(
        f"ruleset_id={ruleset_id} | arquivo={arquivo} | chave={chave} | "
        f"regime=Todos | impacto={impacto} | detalhe={detalhe}"
    )


def _required_number(payload: Dict[str, Any], key: str, *, ruleset_id: str, arquivo: str, impacto: str) -> float:
    if key not in payload:
        raise _ruleset_error(ruleset_id, arquivo, key, impacto, "chave ausente")
    value = payload[key]
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise _ruleset_error(ruleset_id, arquivo, key, impacto, "valor nao numerico")
    return float(value)


def _required_object(payload: Dict[str, Any], key: str, *, ruleset_id: str, arquivo: str, impacto: str) -> Dict[str, Any]:
    if key not in payload:
        raise _ruleset_error(ruleset_id, arquivo, key, impacto, "chave ausente")
    value = payload[key]
    if not isinstance(value, dict):
        raise _ruleset_error(ruleset_id, arquivo, key, impacto, "objeto invalido")
    return value


def build_tabela(nome: str, raw: Any, *, ruleset_id: str = "N/D", arquivo: str = "N/D") -> TabelaProgressiva:
    """
    Converte lista JSON de faixas em TabelaProgressiva validada:
    nao vazia, limites estritamente crescentes, aliquotas nao decrescentes.
    Apenas a ultima faixa pode ter limite null (infinito).
    """
    impacto = f"Tabela {nome} invalida"
    if not isinstance(raw, list) or not raw:
        raise _ruleset_error(ruleset_id, arquivo, nome, impacto, "lista de faixas vazia ou ausente")

    faixas: List[Faixa] = []
    for idx, item in enumerate(raw):
        chave = f"{nome}[{idx}]"
        if not isinstance(item, dict):
            raise _ruleset_error(ruleset_id, arquivo, chave, impacto, "faixa deve ser objeto")

        limite_raw = item.get("limite_superior")
        if limite_raw is None:
            if idx != len(raw) - 1:
                raise _ruleset_error(ruleset_id, arquivo, chave, impacto, "limite null fora da ultima faixa")
            limite = math.inf
        else:
            limite = _required_number(item, "limite_superior", ruleset_id=ruleset_id, arquivo=arquivo, impacto=impacto)
        aliquota = _required_number(item, "aliquota_nominal", ruleset_id=ruleset_id, arquivo=arquivo, impacto=impacto)
        deducao = _required_number(item, "parcela_deduzir", ruleset_id=ruleset_id, arquivo=arquivo, impacto=impacto)

        if aliquota < 0 or deducao < 0:
            raise _ruleset_error(ruleset_id, arquivo, chave, impacto, "aliquota/parcela negativa")
        if faixas:
            anterior = faixas[-1]
            if limite <= anterior.limite_superior:
                raise _ruleset_error(ruleset_id, arquivo, chave, impacto, "limites devem ser estritamente crescentes")
            if aliquota < anterior.aliquota_nominal:
                raise _ruleset_error(ruleset_id, arquivo, chave, impacto, "aliquotas devem ser nao decrescentes")
        faixas.append(Faixa(limite_superior=limite, aliquota_nominal=aliquota, parcela_deduzir=deducao))

    return TabelaProgressiva(nome=nome, faixas=tuple(faixas))


def _build_padroes(metadata: Dict[str, Any], ruleset_id: str) -> Padroes:
    arquivo = "metadata.json"
    impacto = "Sem defaults de normalizacao"
    raw = _required_object(metadata, "padroes", ruleset_id=ruleset_id, arquivo=arquivo, impacto=impacto)
    numero_socios = _required_number(raw, "numero_socios", ruleset_id=ruleset_id, arquivo=arquivo, impacto=impacto)
    return Padroes(
        aliquota_iss_percentual=_required_number(
            raw, "aliquota_iss_percentual", ruleset_id=ruleset_id, arquivo=arquivo, impacto=impacto
        ),
        aliquota_icms_percentual=_required_number(
            raw, "aliquota_icms_percentual", ruleset_id=ruleset_id, arquivo=arquivo, impacto=impacto
        ),
        margem_lucro_real=_required_number(raw, "margem_lucro_real", ruleset_id=ruleset_id, arquivo=arquivo, impacto=impacto),
        iss_fixo_mensal_por_socio=_required_number(
            raw, "iss_fixo_mensal_por_socio", ruleset_id=ruleset_id, arquivo=arquivo, impacto=impacto
        ),
        numero_socios=int(numero_socios),
    )


def _build_presumido(params: Dict[str, Any], ruleset_id: str) -> ParametrosPresumido:
    arquivo = "presumido_params.json"
    impacto = "Nao e possivel calcular Lucro Presumido"

    def num(key: str) -> float:
        return _required_number(params, key, ruleset_id=ruleset_id, arquivo=arquivo, impacto=impacto)

    percentuais = _required_object(params, "percentual_presuncao", ruleset_id=ruleset_id, arquivo=arquivo, impacto=impacto)
    presuncao: Dict[str, Presuncao] = {}
    for chave in PRESUNCAO_CHAVES:
        item = _required_object(percentuais, chave, ruleset_id=ruleset_id, arquivo=arquivo, impacto=impacto)
        presuncao[chave] = Presuncao(
            irpj=_required_number(item, "irpj", ruleset_id=ruleset_id, arquivo=arquivo, impacto=impacto),
            csll=_required_number(item, "csll", ruleset_id=ruleset_id, arquivo=arquivo, impacto=impacto),
        )

    return ParametrosPresumido(
        pis=num("pis"),
        cofins=num("cofins"),
        irpj=num("irpj"),
        adicional_irpj=num("adicional_irpj"),
        limite_adicional_irpj_mensal=num("limite_adicional_irpj_mensal"),
        csll=num("csll"),
        presuncao=MappingProxyType(presuncao),
    )


def _build_real(params: Dict[str, Any], ruleset_id: str) -> ParametrosReal:
    arquivo = "real_params.json"
    impacto = "Nao e possivel calcular Lucro Real"

    def num(key: str) -> float:
        return _required_number(params, key, ruleset_id=ruleset_id, arquivo=arquivo, impacto=impacto)

    return ParametrosReal(
        pis=num("pis_nao_cumulativo"),
        cofins=num("cofins_nao_cumulativo"),
        irpj=num("irpj"),
        adicional_irpj=num("adicional_irpj"),
        limite_adicional_irpj_mensal=num("limite_adicional_irpj_mensal"),
        csll=num("csll"),
    )


def _build_varejo(params: Dict[str, Any], ruleset_id: str) -> ParametrosVarejo:
    arquivo = "varejo_params.json"
    impacto = "Nao e possivel calcular ICMS-ST/combustiveis"
    return ParametrosVarejo(
        cide_por_litro=_required_number(params, "cide_por_litro", ruleset_id=ruleset_id, arquivo=arquivo, impacto=impacto),
        aliquota_combustivel_presumido=_required_number(
            params, "aliquota_combustivel_presumido", ruleset_id=ruleset_id, arquivo=arquivo, impacto=impacto
        ),
    )


def build_legal_constants(ruleset_id: str) -> LegalConstants:
    metadata = load_ruleset(ruleset_id)
    payroll = get_payroll_tables(ruleset_id)
    simples = get_simples_tables(ruleset_id)
    mei = get_mei_params(ruleset_id)

    def payroll_num(key: str) -> float:
        return _required_number(
            payroll, key, ruleset_id=ruleset_id, arquivo="payroll_tables.json", impacto="Nao e possivel calcular folha"
        )

    encargos_raw = _required_object(
        payroll, "encargos_clt", ruleset_id=ruleset_id, arquivo="payroll_tables.json", impacto="Sem simulacao CLT"
    )

    def encargo(key: str) -> float:
        return _required_number(
            encargos_raw, key, ruleset_id=ruleset_id, arquivo="payroll_tables.json", impacto="Sem simulacao CLT"
        )

    anexos_raw = _required_object(
        simples, "anexos", ruleset_id=ruleset_id, arquivo="simples_tables.json", impacto="Nao e possivel calcular DAS"
    )
    anexos: Dict[str, TabelaProgressiva] = {}
    for anexo in ANEXOS_SIMPLES:
        if anexo not in anexos_raw:
            raise _ruleset_error(
                ruleset_id, "simples_tables.json", f"anexos.{anexo}", "Nao e possivel calcular DAS", "anexo nao encontrado"
            )
        anexos[anexo] = build_tabela(
            f"anexos.{anexo}", anexos_raw[anexo], ruleset_id=ruleset_id, arquivo="simples_tables.json"
        )

    salario_minimo = payroll_num("salario_minimo")
    mei_impacto = "Nao e possivel calcular MEI"

    def mei_num(key: str) -> float:
        return _required_number(mei, key, ruleset_id=ruleset_id, arquivo="mei_params.json", impacto=mei_impacto)

    ano_fiscal: Optional[Any] = metadata.get("ano_fiscal")
    if not isinstance(ano_fiscal, int):
        raise _ruleset_error(ruleset_id, "metadata.json", "ano_fiscal", "Ruleset sem ano fiscal", "inteiro esperado")

    return LegalConstants(
        ruleset_id=ruleset_id,
        ano_fiscal=ano_fiscal,
        salario_minimo=salario_minimo,
        teto_inss=payroll_num("teto_inss"),
        contribuicao_teto_inss=payroll_num("contribuicao_teto_inss"),
        deducao_dependente=payroll_num("deducao_dependente"),
        aliquota_cpp=payroll_num("aliquota_cpp"),
        aliquota_inss_autonomo=payroll_num("aliquota_inss_autonomo"),
        encargos_clt=EncargosClt(
            inss_patronal=encargo("inss_patronal"),
            fgts=encargo("fgts"),
            rat=encargo("rat"),
            terceiros=encargo("terceiros"),
        ),
        tabela_inss=build_tabela(
            "tabela_inss", payroll.get("tabela_inss"), ruleset_id=ruleset_id, arquivo="payroll_tables.json"
        ),
        tabela_irpf=build_tabela(
            "tabela_irpf", payroll.get("tabela_irpf"), ruleset_id=ruleset_id, arquivo="payroll_tables.json"
        ),
        anexos_simples=MappingProxyType(anexos),
        limite_simples=_required_number(
            simples,
            "limite_elegibilidade_simples",
            ruleset_id=ruleset_id,
            arquivo="simples_tables.json",
            impacto="Nao e possivel validar elegibilidade do Simples",
        ),
        fator_r_limite=_required_number(
            simples,
            "fator_r_limite",
            ruleset_id=ruleset_id,
            arquivo="simples_tables.json",
            impacto="Nao e possivel determinar anexo III/V",
        ),
        mei=ParametrosMei(
            limite_anual=mei_num("limite_anual"),
            inss=salario_minimo * mei_num("inss_percentual_salario_minimo"),
            icms=mei_num("icms_fixo"),
            iss=mei_num("iss_fixo"),
        ),
        presumido=_build_presumido(get_presumido_params(ruleset_id), ruleset_id),
        real=_build_real(get_real_params(ruleset_id), ruleset_id),
        varejo=_build_varejo(get_varejo_params(ruleset_id), ruleset_id),
        padroes=_build_padroes(metadata, ruleset_id),
    )


def load_legal_constants(ruleset_id: Optional[str] = None) -> LegalConstants:
    """Carrega (uma vez por ruleset) o snapshot de constantes legais."""
    resolved = resolve_ruleset_id(ruleset_id)
    if resolved not in _CONSTANTS_CACHE:
        _CONSTANTS_CACHE[resolved] = build_legal_constants(resolved)
    return _CONSTANTS_CACHE[resolved]
