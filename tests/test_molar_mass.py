import unittest
from chembalance.elements import DEFAULT_TABLE, ElementData, PeriodicTable
from chembalance.errors import FormulaSyntaxError, UnknownElementError
from chembalance.molar_mass import calculate_molar_mass

class TestMolarMass(unittest.TestCase):
    def test_water(self):
        h = DEFAULT_TABLE.lookup("H").atomic_mass
        o = DEFAULT_TABLE.lookup("O").atomic_mass
        result = calculate_molar_mass("H2O")

        self.assertAlmostEqual(result.total_mass, 2 * h + o)
        self.assertEqual([c.symbol for c in result.components], ["H", "O"])
        self.assertEqual(result.components[0].count, 2)
        self.assertAlmostEqual(result.components[0].contribution, 2 * h)
        self.assertAlmostEqual(result.components[1].atomic_mass, o)

    def test_components_sorted_by_atomic_number(self):
        # Input order O, C, H, N; atomic numbers 8, 6, 1, 7
        result = calculate_molar_mass("OCH3N")
        self.assertEqual([c.symbol for c in result.components], ["H", "C", "N", "O"])

        # Alphabetical would put Cl before Na
        result = calculate_molar_mass("NaCl")
        self.assertEqual([c.symbol for c in result.components], ["Na", "Cl"])

    def test_sulfuric_acid(self):
        result = calculate_molar_mass("H2SO4")
        self.assertAlmostEqual(result.total_mass, 98.072, places=3)

    def test_glucose(self):
        result = calculate_molar_mass("C6H12O6")
        self.assertAlmostEqual(result.total_mass, 180.156, places=3)

    def test_mass_percentages(self):
        result = calculate_molar_mass("H2O")
        percentages = result.mass_percentages()
        self.assertAlmostEqual(sum(percentages.values()), 100.0)
        self.assertAlmostEqual(percentages["O"], 100.0 * 15.999 / 18.015, places=6)

    def test_errors_propagate(self):
        with self.assertRaises(UnknownElementError):
            calculate_molar_mass("Qq2")
        with self.assertRaises(FormulaSyntaxError):
            calculate_molar_mass("Ca(OH")

    def test_custom_registry(self):
        table = PeriodicTable([
            ElementData("O", "Oxygen", 8, 16.0),
            ElementData("H", "Hydrogen", 1, 1.0),
        ])
        result = calculate_molar_mass("H2O", table)
        self.assertEqual(result.total_mass, 18.0)
        self.assertEqual([c.symbol for c in result.components], ["H", "O"])

if __name__ == '__main__':
    unittest.main()
