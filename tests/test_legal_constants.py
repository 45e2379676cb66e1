import math
import unittest
from dataclasses import FrozenInstanceError

from legal_constants import build_tabela, load_legal_constants
from ruleset_loader import DEFAULT_RULESET_ID


class LegalConstantsTests(unittest.TestCase):
    def setUp(self) -> None:
        self.c = load_legal_constants(DEFAULT_RULESET_ID)

    def test_carrega_valores_2025(self) -> None:
        self.assertEqual(self.c.ano_fiscal, 2025)
        self.assertEqual(self.c.salario_minimo, 1518.0)
        self.assertAlmostEqual(self.c.mei.inss, 75.90, places=2)
        self.assertEqual(self.c.limite_simples, 4_800_000.0)
        self.assertEqual(self.c.presumido.presuncao["comercio"].csll, 0.12)
        self.assertAlmostEqual(self.c.encargos_clt.total, 0.348, places=6)
        self.assertAlmostEqual(self.c.varejo.cide_por_litro, 0.10, places=6)
        self.assertAlmostEqual(self.c.varejo.aliquota_combustivel_presumido, 0.0365, places=6)

    def test_ultima_faixa_irpf_e_infinita(self) -> None:
        self.assertTrue(math.isinf(self.c.tabela_irpf.faixas[-1].limite_superior))

    def test_cache_por_ruleset(self) -> None:
        self.assertIs(load_legal_constants(DEFAULT_RULESET_ID), self.c)

    def test_snapshot_imutavel(self) -> None:
        with self.assertRaises(FrozenInstanceError):
            self.c.salario_minimo = 1.0  # type: ignore[misc]
        with self.assertRaises(TypeError):
            self.c.anexos_simples["I"] = self.c.anexos_simples["V"]  # type: ignore[index]

    def test_anexo_desconhecido(self) -> None:
        with self.assertRaises(ValueError):
            self.c.anexo("VI")


class BuildTabelaValidationTests(unittest.TestCase):
    def _faixa(self, limite, aliquota, deducao=0.0):
        return {"limite_superior": limite, "aliquota_nominal": aliquota, "parcela_deduzir": deducao}

    def test_tabela_vazia(self) -> None:
        with self.assertRaises(ValueError) as ctx:
            build_tabela("t", [], ruleset_id="X", arquivo="t.json")
        self.assertIn("ruleset_id=X | arquivo=t.json | chave=t", str(ctx.exception))

    def test_limites_nao_crescentes(self) -> None:
        with self.assertRaises(ValueError) as ctx:
            build_tabela("t", [self._faixa(100, 0.1), self._faixa(100, 0.2)])
        self.assertIn("estritamente crescentes", str(ctx.exception))

    def test_aliquota_decrescente(self) -> None:
        with self.assertRaises(ValueError) as ctx:
            build_tabela("t", [self._faixa(100, 0.2), self._faixa(200, 0.1)])
        self.assertIn("nao decrescentes", str(ctx.exception))

    def test_limite_null_fora_da_ultima_faixa(self) -> None:
        with self.assertRaises(ValueError):
            build_tabela("t", [self._faixa(None, 0.1), self._faixa(200, 0.2)])

    def test_valor_nao_numerico(self) -> None:
        with self.assertRaises(ValueError) as ctx:
            build_tabela("t", [self._faixa(100, "10%")])
        self.assertIn("detalhe=valor nao numerico", str(ctx.exception))

    def test_tabela_valida(self) -> None:
        tabela = build_tabela("t", [self._faixa(100, 0.0), self._faixa(None, 0.1, 10.0)])
        self.assertEqual(len(tabela.faixas), 2)
        self.assertTrue(math.isinf(tabela.faixas[1].limite_superior))


if __name__ == "__main__":
    unittest.main()
