import json
import unittest
from typer.testing import CliRunner
from chembalance.cli import app

class TestCLI(unittest.TestCase):
    def setUp(self):
        self.runner = CliRunner()

    def test_balance(self):
        result = self.runner.invoke(app, ["balance", "H2 + O2 -> H2O"])
        self.assertEqual(result.exit_code, 0, result.output)
        payload = json.loads(result.stdout)
        self.assertEqual(payload["coefficients"], [2, 1, 2])
        self.assertEqual(payload["balanced"], "2H2 + O2 → 2H2O")

    def test_formula(self):
        result = self.runner.invoke(app, ["formula", "Ca3(PO4)2"])
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(json.loads(result.stdout)["elements"], {"Ca": 3, "P": 2, "O": 8})

    def test_molar_mass(self):
        result = self.runner.invoke(app, ["molar-mass", "H2O"])
        self.assertEqual(result.exit_code, 0, result.output)
        payload = json.loads(result.stdout)
        self.assertAlmostEqual(payload["molar_mass"], 18.015)
        self.assertEqual([c["symbol"] for c in payload["components"]], ["H", "O"])

    def test_yield(self):
        result = self.runner.invoke(
            app,
            [
                "yield", "2H2 + O2 -> 2H2O",
                "--limiting", "H2", "--mass", "4.032",
                "--product", "H2O", "--actual", "18.015",
            ],
        )
        self.assertEqual(result.exit_code, 0, result.output)
        payload = json.loads(result.stdout)
        self.assertAlmostEqual(payload["theoretical_yield"], 36.03, places=6)
        self.assertAlmostEqual(payload["percent_yield"], 50.0, places=6)

    def test_error_exit_code(self):
        result = self.runner.invoke(app, ["balance", "H2 O2"])
        self.assertEqual(result.exit_code, 1)

if __name__ == '__main__':
    unittest.main()
