import unittest
from fluid_engine import IHPSFluidEngine
from models import ClinicalSnapshot

class TestClinicalScenarios(unittest.TestCase):
    """
    Typical IHPS presentations run end to end through the plan engine.
    Run with: python -m unittest test_clinical_scenarios.py
    """

    def create_base_infant(self, **overrides):
        # Helper: 5 kg infant with corrected labs
        labs = {
            'sodium': 140,
            'potassium': 4.0,
            'chloride': 105,
            'ph': 7.4,
            'weight': 5.0,
        }
        labs.update(overrides)
        return ClinicalSnapshot(**labs)

    def test_01_classic_severe_depletion(self):
        """[FULL PLAN] Hyponatraemic, hypokalaemic, hypochloraemic 3.2 kg infant"""
        print("\nTEST 1: Severe Depletion (Na 129, K 2.8, Cl 67)")
        snapshot = self.create_base_infant(sodium=129, potassium=2.8, chloride=67, weight=3.2)
        plan = IHPSFluidEngine.generate_plan(snapshot)
        print(f"  > {plan.human_readable_summary}")

        self.assertEqual(plan.fluid_type, "NS + 5% Dextrose + 40 mEq/L KCl")
        self.assertEqual(
            plan.fluid_selection_reason,
            "Low sodium - NS + 5% Dextrose for sodium correction + aggressive KCl for severe hypokalaemia"
        )
        self.assertEqual(plan.maintenance_rate, 13)
        self.assertEqual(plan.fluid_rate_per_hour, 19)
        # No low-weight penalty: 3.2 kg >= 3.0 kg
        self.assertEqual(plan.correction_time, 36)
        self.assertEqual(plan.total_fluid_volume, 691)

        self.assertEqual(plan.bolus_recommendation.volume, 20)
        self.assertEqual(plan.bolus_recommendation.total_volume, 64)

        self.assertEqual(plan.alerts, (
            "CRITICAL: Severe hypokalaemia - aggressive KCl needed",
            "WARNING: Severe hyponatremia - use NS + 5% Dextrose",
            "WARNING: Severe hypochloremia - expect longer correction time",
        ))
        self.assertEqual(plan.recheck_interval, "24 hours")
        self.assertEqual(plan.next_lab_check, "Next lab check in 24 hours (monitoring improvement)")

    def test_02_corrected_labs(self):
        """[FULL PLAN] Normal electrolytes: maintenance only"""
        print("\nTEST 2: Corrected Labs")
        plan = IHPSFluidEngine.generate_plan(self.create_base_infant())
        print(f"  > {plan.human_readable_summary}")

        self.assertEqual(plan.fluid_type, "D5 1/2 NS + 20 mEq/L KCl")
        self.assertEqual(plan.fluid_rate_per_hour, 30)
        self.assertEqual(plan.maintenance_rate, 20)
        self.assertEqual(plan.correction_time, 12)
        self.assertEqual(plan.total_fluid_volume, 360)
        self.assertEqual(plan.bolus_recommendation.volume, 0)
        self.assertEqual(plan.bolus_recommendation.reason, "No bolus needed - mild abnormalities")
        self.assertEqual(plan.alerts, ())
        self.assertEqual(plan.recheck_interval, "12 hours")
        self.assertEqual(
            plan.human_readable_summary,
            "Give D5 1/2 NS + 20 mEq/L KCl (5% Dextrose in 0.45% Saline) at 30 mL/hr "
            "for 12 hours (360 mL). No bolus. Recheck labs in 12 hours."
        )

    def test_03_small_alkalotic_infant(self):
        """[CORRECTION TIME] Moderate alkalosis in a 2.5 kg infant gets the weight penalty"""
        print("\nTEST 3: Small Alkalotic Infant")
        plan = IHPSFluidEngine.generate_plan(self.create_base_infant(ph=7.5, weight=2.5))

        self.assertEqual(plan.correction_time, 24)
        self.assertEqual(plan.fluid_rate_per_hour, 15)
        self.assertEqual(plan.total_fluid_volume, 360)
        self.assertEqual(plan.bolus_recommendation.volume, 10)
        self.assertEqual(plan.bolus_recommendation.total_volume, 25)
        self.assertEqual(plan.alerts, ())
        self.assertEqual(plan.recheck_interval, "12 hours")

    def test_04_hypoglycaemic_hyperkalaemic(self):
        """[FLUID CHOICE] Hypoglycaemia with high potassium: D10, KCl held"""
        print("\nTEST 4: Hypoglycaemia + Hyperkalaemia")
        plan = IHPSFluidEngine.generate_plan(
            self.create_base_infant(glucose=2.1, potassium=5.8, lactate=2.6)
        )

        self.assertEqual(plan.fluid_type, "D10 NS")
        self.assertIn("hold KCl", plan.fluid_selection_reason)
        self.assertEqual(plan.alerts, ("CRITICAL: Hyperkalaemia risk - hold KCl, monitor closely",))
        # Lactate escalates an otherwise zero bolus
        self.assertEqual(plan.bolus_recommendation.volume, 10)
        self.assertEqual(plan.bolus_recommendation.total_volume, 50)

    def test_05_severe_alkalosis_low_weight(self):
        """[CORRECTION TIME] Worst case reaches the 42 h ceiling"""
        print("\nTEST 5: Severe Alkalosis, 2.8 kg")
        plan = IHPSFluidEngine.generate_plan(
            self.create_base_infant(sodium=127, chloride=62, ph=7.62, weight=2.8)
        )

        self.assertEqual(plan.correction_time, 42)
        self.assertEqual(plan.fluid_rate_per_hour, 17)
        self.assertEqual(plan.total_fluid_volume, 706)
        self.assertEqual(plan.recheck_interval, "24 hours")
        self.assertEqual(len(plan.alerts), 3)

if __name__ == '__main__':
    unittest.main()
