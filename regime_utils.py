from __future__ import annotations

from enum import Enum
from typing import Any, Optional


class RegimeKind(str, Enum):
    MEI = "mei"
    SIMPLES_SINGLE = "simples_single"
    SIMPLES_MIXED = "simples_mixed"
    PRESUMED = "presumed"
    PRESUMED_MIXED = "presumed_mixed"
    REAL = "real"
    CARNE_LEAO = "carne_leao"
    CLT = "clt"


class ScenarioCategory(str, Enum):
    PF = "pf"
    PJ = "pj"


REGIME_DISPLAY_MEI = "MEI"
REGIME_DISPLAY_PRESUMIDO = "Lucro Presumido"
REGIME_DISPLAY_REAL = "Lucro Real (Estimativa)"
REGIME_DISPLAY_CARNE_LEAO = "Carnê-Leão (Pessoa Física)"
REGIME_DISPLAY_CLT = "CLT (Simulação como Empregado)"

TIPO_COMERCIO = "comercio"
TIPO_SERVICO = "servico"
TIPO_INDUSTRIA = "industria"
TIPOS_ATIVIDADE = (TIPO_COMERCIO, TIPO_SERVICO, TIPO_INDUSTRIA)

ANEXOS_VALIDOS = ("I", "II", "III", "IV", "V")

TIPO_CLIENTE_ABERTURA = "Novo aberturas de empresa"
TIPO_CLIENTE_TRANSFERENCIA = "Transferências de contabilidade"

_TIPO_ALIASES = {
    "comercio": TIPO_COMERCIO,
    "comércio": TIPO_COMERCIO,
    "commerce": TIPO_COMERCIO,
    "servico": TIPO_SERVICO,
    "serviço": TIPO_SERVICO,
    "servicos": TIPO_SERVICO,
    "serviços": TIPO_SERVICO,
    "service": TIPO_SERVICO,
    "industria": TIPO_INDUSTRIA,
    "indústria": TIPO_INDUSTRIA,
    "industry": TIPO_INDUSTRIA,
}

_ANEXO_ALIASES = {"1": "I", "2": "II", "3": "III", "4": "IV", "5": "V"}


def _normalize_text(value: Any) -> str:
    return str(value or "").strip()


def _normalize_text_lower(value: Any) -> str:
    return _normalize_text(value).lower()


def canonicalize_tipo_atividade(tipo: Any) -> str:
    """Aceita aliases PT/EN (com ou sem acento) e devolve comercio|servico|industria."""
    raw = _normalize_text_lower(tipo)
    if raw in _TIPO_ALIASES:
        return _TIPO_ALIASES[raw]
    raise ValueError(f"tipo de atividade inválido: '{tipo}'. Use comercio, servico ou industria.")


def canonicalize_anexo(anexo: Any) -> str:
    raw = _normalize_text(anexo).upper()
    if raw.startswith("ANEXO"):
        raw = raw[len("ANEXO"):].strip()
    raw = _ANEXO_ALIASES.get(raw, raw)
    if raw in ANEXOS_VALIDOS:
        return raw
    raise ValueError(f"anexo do Simples inválido: '{anexo}'. Use I, II, III, IV ou V.")


def parse_bool(value: Any, default: bool = False) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    raw = _normalize_text_lower(value)
    if raw in ("1", "true", "sim", "s", "yes", "y", "mei"):
        return True
    if raw in ("0", "false", "nao", "não", "n", "no", ""):
        return False
    raise ValueError(f"valor booleano inválido: '{value}'.")


def is_servico(tipo: Optional[str]) -> bool:
    return tipo == TIPO_SERVICO


def is_comercio_ou_industria(tipo: Optional[str]) -> bool:
    return tipo in (TIPO_COMERCIO, TIPO_INDUSTRIA)
