import unittest

from dto import Activity
from legal_constants import load_legal_constants
from regimes import calcular_mei


def _atividade(nome: str, tipo: str) -> Activity:
    return Activity(nome=nome, receita=1000.0, tipo=tipo, anexo_simples="I", elegivel_mei=True)


class MeiTests(unittest.TestCase):
    def setUp(self) -> None:
        self.c = load_legal_constants()

    def test_somente_servico(self) -> None:
        imposto, det = calcular_mei(12000.0, [_atividade("Design", "servico")], self.c)
        self.assertAlmostEqual(imposto, 80.90, places=2)
        self.assertEqual([t.descricao for t in det["tributos"]], ["INSS (5% salário mínimo)", "ISS (fixo)"])
        self.assertTrue(det["elegivel"])

    def test_somente_comercio(self) -> None:
        imposto, det = calcular_mei(12000.0, [_atividade("Loja", "comercio")], self.c)
        self.assertAlmostEqual(imposto, 76.90, places=2)
        self.assertEqual(det["tributos"][-1].descricao, "ICMS (fixo)")

    def test_comercio_e_servico(self) -> None:
        atividades = [_atividade("Bar", "comercio"), _atividade("Quadra", "servico")]
        imposto, _ = calcular_mei(24000.0, atividades, self.c)
        self.assertAlmostEqual(imposto, 81.90, places=2)

    def test_custo_independe_do_faturamento_e_inelegivel_acima_do_limite(self) -> None:
        atividades = [_atividade("Design", "servico")]
        baixo, _ = calcular_mei(10000.0, atividades, self.c)
        alto, det = calcular_mei(500000.0, atividades, self.c)
        self.assertEqual(baixo, alto)
        self.assertFalse(det["elegivel"])
        self.assertEqual(len(det["motivos"]), 1)


if __name__ == "__main__":
    unittest.main()
