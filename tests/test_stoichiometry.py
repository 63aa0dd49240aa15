import unittest
from chembalance.balancer import balance_equation
from chembalance.equation import parse_equation
from chembalance.errors import StoichiometryError
from chembalance.molar_mass import calculate_molar_mass
from chembalance.stoichiometry import (
    Reagent,
    find_limiting_reagent,
    mass_from_moles,
    moles_from_mass,
    percent_yield,
    reaction_amounts,
    theoretical_yield,
)

class TestConversions(unittest.TestCase):
    def test_mass_mole_conversion(self):
        water = calculate_molar_mass("H2O").total_mass
        self.assertAlmostEqual(moles_from_mass("H2O", water * 3), 3.0)
        self.assertAlmostEqual(mass_from_moles("H2O", 0.5), water / 2)

    def test_negative_amounts_rejected(self):
        with self.assertRaises(StoichiometryError):
            moles_from_mass("H2O", -1.0)
        with self.assertRaises(StoichiometryError):
            mass_from_moles("H2O", -1.0)

class TestYield(unittest.TestCase):
    def test_theoretical_yield(self):
        # 2 mol H2 -> 2 mol H2O
        mass = theoretical_yield("2H2 + O2 -> 2H2O", "H2", 4.032, "H2O")
        self.assertAlmostEqual(mass, 2 * calculate_molar_mass("H2O").total_mass, places=6)

    def test_theoretical_yield_uses_written_ratio(self):
        # 1 mol O2 -> 2 mol H2O
        o2 = calculate_molar_mass("O2").total_mass
        mass = theoretical_yield("2H2 + O2 -> 2H2O", "O2", o2, "H2O")
        self.assertAlmostEqual(mass, 2 * calculate_molar_mass("H2O").total_mass, places=6)

    def test_missing_compounds(self):
        with self.assertRaises(StoichiometryError):
            theoretical_yield("2H2 + O2 -> 2H2O", "N2", 1.0, "H2O")
        with self.assertRaises(StoichiometryError):
            theoretical_yield("2H2 + O2 -> 2H2O", "H2", 1.0, "H2O2")

    def test_percent_yield(self):
        self.assertAlmostEqual(percent_yield(40.0, 30.0), 75.0)
        with self.assertRaises(StoichiometryError):
            percent_yield(0.0, 1.0)

class TestLimitingReagent(unittest.TestCase):
    def test_find_limiting_reagent(self):
        reagents = [Reagent("H2", 2, 4.0), Reagent("O2", 1, 64.0)]
        self.assertEqual(find_limiting_reagent(reagents), "H2")

        reagents = [Reagent("H2", 2, 40.0), Reagent("O2", 1, 8.0)]
        self.assertEqual(find_limiting_reagent(reagents), "O2")

    def test_empty_reagents(self):
        with self.assertRaises(StoichiometryError):
            find_limiting_reagent([])

    def test_reaction_amounts(self):
        reaction = balance_equation("H2 + O2 -> H2O").reaction
        amounts = reaction_amounts(reaction, {"H2": 4.032, "O2": 100.0})

        self.assertEqual(amounts.limiting_formula, "H2")
        self.assertAlmostEqual(amounts.extent, 1.0)
        self.assertAlmostEqual(amounts.moles["H2O"], 2.0)
        self.assertAlmostEqual(amounts.moles["O2"], 1.0)
        self.assertAlmostEqual(amounts.masses["O2"], calculate_molar_mass("O2").total_mass)

    def test_reaction_amounts_requires_balanced_reaction(self):
        reaction = parse_equation("H2 + O2 -> H2O").to_reaction()
        with self.assertRaises(StoichiometryError):
            reaction_amounts(reaction, {"H2": 4.032, "O2": 100.0})

    def test_reaction_amounts_unknown_reactant(self):
        reaction = balance_equation("H2 + O2 -> H2O").reaction
        with self.assertRaises(StoichiometryError):
            reaction_amounts(reaction, {"N2": 1.0})

if __name__ == '__main__':
    unittest.main()
