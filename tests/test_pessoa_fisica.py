import unittest

from legal_constants import load_legal_constants
from pessoa_fisica import calcular_carne_leao, calcular_clt


class CarneLeaoTests(unittest.TestCase):
    def setUp(self) -> None:
        self.c = load_legal_constants()

    def test_inss_limitado_ao_teto(self) -> None:
        imposto, det = calcular_carne_leao(10000.0, 0.0, self.c)
        self.assertAlmostEqual(det["inss"], 1631.482, places=3)
        self.assertAlmostEqual(det["irpf"], 1392.61245, places=4)
        self.assertAlmostEqual(imposto, 3024.09445, places=4)
        self.assertEqual([t.descricao for t in det["tributos"]], ["INSS Autônomo", "IRPF Progressivo"])

    def test_despesas_reduzem_base_do_irpf(self) -> None:
        _, sem = calcular_carne_leao(10000.0, 0.0, self.c)
        _, com = calcular_carne_leao(10000.0, 3000.0, self.c)
        self.assertEqual(sem["inss"], com["inss"])
        self.assertLess(com["irpf"], sem["irpf"])


class CltTests(unittest.TestCase):
    def setUp(self) -> None:
        self.c = load_legal_constants()

    def test_retencoes_e_encargos(self) -> None:
        imposto, det = calcular_clt(10000.0, self.c)
        self.assertAlmostEqual(det["inss_empregado"], 951.64, places=2)
        self.assertAlmostEqual(det["irrf_empregado"], 1579.569, places=3)
        self.assertAlmostEqual(det["encargos_empregador"], 3480.0, places=2)
        self.assertAlmostEqual(det["salario_liquido"], 10000.0 - 951.64 - 1579.569, places=3)
        self.assertAlmostEqual(det["custo_total_empresa"], 13480.0, places=2)
        self.assertAlmostEqual(imposto, 6011.209, places=3)
        self.assertEqual(len(det["tributos"]), 6)


if __name__ == "__main__":
    unittest.main()
