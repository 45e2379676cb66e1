import json
import logging
import os
import sys
from copy import deepcopy
from typing import Any, Dict, Optional, Tuple

DEFAULT_RULESET_ID = "BR_TAX_2025_V1"
RULESET_ENV_VAR = "TSE_RULESET_ID"

logger = logging.getLogger(__name__)

_CACHE: Dict[Tuple[str, str], Dict[str, Any]] = {}

# destino dos data-files em instalacoes nao editaveis (ver pyproject.toml)
INSTALLED_RULESETS_DIR = os.path.join("share", "tax-scenario-engine", "rulesets")


def _runtime_base_dir() -> str:
    """
    Resolve diretorio base para modo normal e executavel PyInstaller.
    """
    if getattr(sys, "frozen", False):
        meipass = getattr(sys, "_MEIPASS", None)
        if isinstance(meipass, str) and meipass.strip():
            return meipass
        return os.path.dirname(sys.executable)
    return os.path.dirname(os.path.abspath(__file__))


def _rulesets_dir() -> str:
    local = os.path.join(_runtime_base_dir(), "rulesets")
    if os.path.isdir(local):
        return local
    return os.path.join(sys.prefix, INSTALLED_RULESETS_DIR)


def _ruleset_dir(ruleset_id: str) -> str:
    return os.path.join(_rulesets_dir(), ruleset_id)


def resolve_ruleset_id(ruleset_id: Optional[str] = None) -> str:
    """Ruleset explicito > variavel de ambiente TSE_RULESET_ID > default."""
    if isinstance(ruleset_id, str) and ruleset_id.strip():
        return ruleset_id.strip()
    env_value = os.getenv(RULESET_ENV_VAR)
    if env_value and env_value.strip():
        return env_value.strip()
    return DEFAULT_RULESET_ID


def _load_json(ruleset_id: str, filename: str) -> Dict[str, Any]:
    key = (ruleset_id, filename)
    if key in _CACHE:
        return deepcopy(_CACHE[key])

    ruleset_path = _ruleset_dir(ruleset_id)
    if not os.path.isdir(ruleset_path):
        raise FileNotFoundError(f"Ruleset '{ruleset_id}' não encontrado em {ruleset_path}.")

    file_path = os.path.join(ruleset_path, filename)
    if not os.path.isfile(file_path):
        raise FileNotFoundError(f"Arquivo '{filename}' não encontrado para ruleset '{ruleset_id}'.")

    with open(file_path, "r", encoding="utf-8-sig") as f:
        payload = json.load(f)

    if not isinstance(payload, dict):
        raise ValueError(f"Arquivo '{filename}' do ruleset '{ruleset_id}' deve conter objeto JSON.")

    logger.debug("ruleset %s: %s carregado de %s", ruleset_id, filename, file_path)
    _CACHE[key] = payload
    return deepcopy(payload)


def load_ruleset(ruleset_id: str) -> Dict[str, Any]:
    return _load_json(ruleset_id, "metadata.json")


def get_payroll_tables(ruleset_id: str) -> Dict[str, Any]:
    return _load_json(ruleset_id, "payroll_tables.json")


def get_simples_tables(ruleset_id: str) -> Dict[str, Any]:
    return _load_json(ruleset_id, "simples_tables.json")


def get_mei_params(ruleset_id: str) -> Dict[str, Any]:
    return _load_json(ruleset_id, "mei_params.json")


def get_presumido_params(ruleset_id: str) -> Dict[str, Any]:
    return _load_json(ruleset_id, "presumido_params.json")


def get_real_params(ruleset_id: str) -> Dict[str, Any]:
    return _load_json(ruleset_id, "real_params.json")


def get_varejo_params(ruleset_id: str) -> Dict[str, Any]:
    return _load_json(ruleset_id, "varejo_params.json")
