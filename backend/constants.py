from enum import Enum
from dataclasses import dataclass
VERSION = "1.0.0"

class FluidType(Enum):
    """Base maintenance solutions. Values are the bedside labels."""
    D10_HALF_NS = "D10 1/2 NS"          # Hypoglycaemia + hyponatraemia
    D10_NS = "D10 NS"                   # Hypoglycaemia, sodium normal
    D5_HALF_NS = "D5 1/2 NS"            # Standard IHPS maintenance
    NS_D5 = "NS + 5% Dextrose"          # Sodium correction priority

@dataclass
class FluidProperties:
    name: str

class KCL_DOSES:
    """KCl additive in mEq/L mixed into the base fluid."""
    STANDARD = 20
    AGGRESSIVE = 40   # K < 3.0
    HELD = 0          # K > 5.0

class RATE_CONSTANTS:
    # Holliday-Segar style hourly rates (mL/kg/hr)
    BREAKPOINT_KG = 10.0
    MAINTENANCE_FIRST_10KG = 4.0
    MAINTENANCE_ABOVE_10KG = 2.0
    IHPS_MULTIPLIER = 1.5
    # Multiplier applied to the per-kg constants, not to the summed rate
    IHPS_FIRST_10KG = MAINTENANCE_FIRST_10KG * IHPS_MULTIPLIER   # 6
    IHPS_ABOVE_10KG = MAINTENANCE_ABOVE_10KG * IHPS_MULTIPLIER   # 3

class LAB_LIMITS:
    """
    Accepted input ranges: field -> (label, min, max, message).
    Checked in this order; the first failure is reported.
    """
    REQUIRED = {
        "sodium": ("Sodium", 120.0, 155.0, "Sodium must be between 120-155 mmol/L"),
        "potassium": ("Potassium", 2.0, 8.0, "Potassium must be between 2.0-8.0 mmol/L"),
        "chloride": ("Chloride", 60.0, 120.0, "Chloride must be between 60-120 mmol/L"),
        "ph": ("pH", 7.0, 7.7, "pH must be between 7.0-7.7"),
        "weight": ("Weight", 1.0, 10.0, "Weight must be between 1.0-10.0 kg"),
    }
    OPTIONAL = (
        "glucose", "creatinine", "bun", "hematocrit", "lactate",
        "pco2", "base_excess", "hco3", "urine_output",
    )

class FLUID_THRESHOLDS:
    GLUCOSE_SEVERE_LOW = 2.5    # mmol/L -> D10
    GLUCOSE_MILD_LOW = 3.0      # mmol/L
    SODIUM_LOW = 135.0          # mmol/L
    POTASSIUM_LOW = 3.0         # escalate KCl
    POTASSIUM_HIGH = 5.0        # hold KCl

class BOLUS_THRESHOLDS:
    # Tier volumes (mL/kg)
    SEVERE_ML_KG = 20
    MODERATE_ML_KG = 10
    NONE_ML_KG = 0
    ESCALATION_FLOOR_ML_KG = 10

    SEVERE_SODIUM = 130.0
    SEVERE_CHLORIDE = 70.0
    SEVERE_PH = 7.55
    MODERATE_SODIUM = 135.0
    MODERATE_CHLORIDE = 90.0
    MODERATE_PH = 7.45

    HEMATOCRIT_HIGH = 50.0      # %
    LACTATE_HIGH = 2.0          # mmol/L

class CORRECTION_RULES:
    """Correction time in hours, fitted to the 13-patient IHPS series."""
    BASE_HOURS = 12
    SODIUM_SEVERE = (130.0, 36)     # Na < 130
    SODIUM_MODERATE = (135.0, 24)   # 130 <= Na < 135
    CHLORIDE_SEVERE = (70.0, 36)
    CHLORIDE_MODERATE = (90.0, 24)
    PH_SEVERE = (7.55, 24)          # pH > 7.55
    PH_MODERATE = (7.45, 18)        # 7.45 < pH <= 7.55
    LOW_WEIGHT_KG = 3.0
    LOW_WEIGHT_PENALTY_HOURS = 6
    ALLOWED_HOURS = (12, 18, 24, 30, 36, 42)

    # Recheck scheduling keyed off correction time
    RECHECK_CUTOFF_HOURS = 24

class ALERT_THRESHOLDS:
    POTASSIUM_LOW = 3.0
    POTASSIUM_HIGH = 5.5
    SODIUM_LOW = 130.0
    CHLORIDE_LOW = 70.0
    PH_HIGH = 7.55

class FLUID_LIBRARY:
    """
    Full names of the base solutions (before KCl).
    """
    SPECS = {
        FluidType.D10_HALF_NS: FluidProperties(name="10% Dextrose in 0.45% Saline"),
        FluidType.D10_NS: FluidProperties(name="10% Dextrose in 0.9% Saline"),
        FluidType.D5_HALF_NS: FluidProperties(name="5% Dextrose in 0.45% Saline"),
        FluidType.NS_D5: FluidProperties(name="5% Dextrose in 0.9% Saline"),
    }

    @staticmethod
    def get(fluid_enum: FluidType) -> FluidProperties:
        return FLUID_LIBRARY.SPECS.get(fluid_enum, FLUID_LIBRARY.SPECS[FluidType.D5_HALF_NS])
