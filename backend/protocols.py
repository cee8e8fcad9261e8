# protocols.py
import math
from models import ClinicalSnapshot, FluidSelection, BolusRecommendation, FluidType
from constants import FLUID_THRESHOLDS, BOLUS_THRESHOLDS, KCL_DOSES

def round_half_up(value: float) -> int:
    """Rounds .5 upwards (bedside convention), unlike the builtin round()."""
    return int(math.floor(value + 0.5))

class FluidSelector:
    @staticmethod
    def _select_base_fluid(snapshot: ClinicalSnapshot) -> tuple:
        is_low_sodium = snapshot.sodium < FLUID_THRESHOLDS.SODIUM_LOW
        glucose = snapshot.glucose

        # 1. Hypoglycaemia Priority
        # Glucose < 2.5 mmol/L needs D10 regardless of sodium.
        if glucose is not None and glucose < FLUID_THRESHOLDS.GLUCOSE_SEVERE_LOW:
            if is_low_sodium:
                return (FluidType.D10_HALF_NS,
                        "Low glucose + low sodium - D10 1/2 NS for both glucose and sodium correction")
            return (FluidType.D10_NS,
                    "Low glucose + normal sodium - D10 NS for glucose support")

        # 2. Mildly low glucose: the glucose risk still dominates when sodium is low
        if glucose is not None and glucose < FLUID_THRESHOLDS.GLUCOSE_MILD_LOW:
            if is_low_sodium:
                return (FluidType.D10_HALF_NS,
                        "Mildly low glucose + low sodium - D10 1/2 NS")
            return (FluidType.D5_HALF_NS,
                    "Mildly low glucose - standard D5 1/2 NS with monitoring")

        # 3. Glucose normal or not measured: sodium decides
        if is_low_sodium:
            return (FluidType.NS_D5,
                    "Low sodium - NS + 5% Dextrose for sodium correction")
        return (FluidType.D5_HALF_NS, "Normal sodium - standard D5 1/2 NS")

    @staticmethod
    def select_fluid(snapshot: ClinicalSnapshot) -> FluidSelection:
        fluid, reason = FluidSelector._select_base_fluid(snapshot)

        # Potassium overlay: applies on top of every base fluid
        kcl = KCL_DOSES.STANDARD
        if snapshot.potassium < FLUID_THRESHOLDS.POTASSIUM_LOW:
            kcl = KCL_DOSES.AGGRESSIVE
            reason += " + aggressive KCl for severe hypokalaemia"
        elif snapshot.potassium > FLUID_THRESHOLDS.POTASSIUM_HIGH:
            kcl = KCL_DOSES.HELD
            reason += " + hold KCl for hyperkalaemia"

        return FluidSelection(base_fluid=fluid, kcl_meq_l=kcl, reason=reason)

class BolusCalculator:
    @staticmethod
    def _depletion_tier(snapshot: ClinicalSnapshot) -> tuple:
        t = BOLUS_THRESHOLDS
        is_severe = (
            snapshot.sodium < t.SEVERE_SODIUM
            or snapshot.chloride < t.SEVERE_CHLORIDE
            or snapshot.ph > t.SEVERE_PH
        )
        if is_severe:
            return t.SEVERE_ML_KG, "Severe depletion - 20 mL/kg NS bolus recommended"

        is_moderate = (
            snapshot.sodium < t.MODERATE_SODIUM
            or snapshot.chloride < t.MODERATE_CHLORIDE
            or snapshot.ph > t.MODERATE_PH
        )
        if is_moderate:
            return t.MODERATE_ML_KG, "Moderate depletion - 10 mL/kg NS bolus recommended"

        return t.NONE_ML_KG, "No bolus needed - mild abnormalities"

    @staticmethod
    def calculate_bolus(snapshot: ClinicalSnapshot) -> BolusRecommendation:
        volume, reason = BolusCalculator._depletion_tier(snapshot)

        # --- ESCALATORS (only ever raise the volume) ---
        floor = BOLUS_THRESHOLDS.ESCALATION_FLOOR_ML_KG
        if snapshot.hematocrit is not None and snapshot.hematocrit > BOLUS_THRESHOLDS.HEMATOCRIT_HIGH:
            volume = max(volume, floor)
            reason += " + high hematocrit indicates dehydration"

        if snapshot.lactate is not None and snapshot.lactate > BOLUS_THRESHOLDS.LACTATE_HIGH:
            volume = max(volume, floor)
            reason += " + elevated lactate indicates poor perfusion"

        return BolusRecommendation(
            volume=volume,
            total_volume=round_half_up(volume * snapshot.weight),
            reason=reason,
        )
