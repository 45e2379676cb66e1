import unittest

from legal_constants import load_legal_constants
from payroll import analisar_pro_labore, calcular_cpp, calcular_inss, calcular_irrf


class InssTests(unittest.TestCase):
    def setUp(self) -> None:
        self.c = load_legal_constants()

    def test_salario_minimo(self) -> None:
        self.assertAlmostEqual(calcular_inss(1518.0, self.c), 113.85, places=2)

    def test_terceira_faixa(self) -> None:
        self.assertAlmostEqual(calcular_inss(2800.0, self.c), 229.41, places=2)

    def test_acima_do_teto_usa_contribuicao_fixa(self) -> None:
        self.assertAlmostEqual(calcular_inss(10000.0, self.c), 951.64, places=2)
        self.assertAlmostEqual(calcular_inss(50000.0, self.c), 951.64, places=2)

    def test_base_zero_ou_negativa(self) -> None:
        self.assertEqual(calcular_inss(0.0, self.c), 0.0)
        self.assertEqual(calcular_inss(-10.0, self.c), 0.0)


class IrrfTests(unittest.TestCase):
    def setUp(self) -> None:
        self.c = load_legal_constants()

    def test_faixa_isenta(self) -> None:
        self.assertEqual(calcular_irrf(1404.15, self.c), 0.0)
        self.assertEqual(calcular_irrf(2428.80, self.c), 0.0)

    def test_segunda_faixa(self) -> None:
        self.assertAlmostEqual(calcular_irrf(2500.0, self.c), 5.34, places=2)
        self.assertAlmostEqual(calcular_irrf(2570.59, self.c), 10.63425, places=4)

    def test_ultima_faixa(self) -> None:
        self.assertAlmostEqual(calcular_irrf(5000.0, self.c), 466.27, places=2)

    def test_dependentes_deduzidos_do_imposto_apurado(self) -> None:
        # 466,27 - 2 x 189,59
        self.assertAlmostEqual(calcular_irrf(5000.0, self.c, dependentes=2), 87.09, places=4)

    def test_dependentes_nao_mudam_a_faixa_nem_negativam(self) -> None:
        self.assertEqual(calcular_irrf(2428.80, self.c, dependentes=3), 0.0)
        self.assertEqual(calcular_irrf(2500.0, self.c, dependentes=1), 0.0)


class ProLaboreTests(unittest.TestCase):
    def setUp(self) -> None:
        self.c = load_legal_constants()

    def test_analise_pro_labore(self) -> None:
        pl = analisar_pro_labore(2800.0, self.c)
        self.assertAlmostEqual(pl.valor_inss, 229.41, places=2)
        self.assertAlmostEqual(pl.valor_irrf, 10.63425, places=4)
        self.assertAlmostEqual(pl.valor_liquido, 2800.0 - 229.41 - 10.63425, places=4)

    def test_cpp_vinte_por_cento(self) -> None:
        self.assertAlmostEqual(calcular_cpp(2800.0, self.c), 560.0, places=2)
        self.assertEqual(calcular_cpp(-1.0, self.c), 0.0)


if __name__ == "__main__":
    unittest.main()
