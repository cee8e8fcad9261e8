"""
IHPS Fluid Calculator: Data Dictionary
======================================
Defines the input snapshot (labs + weight), the intermediate decisions and
the final fluid plan handed to the API.

NO CLINICAL LOGIC is implemented here, apart from the input range checks
that guard the engine.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional
from datetime import datetime
from constants import VERSION, FluidType, LAB_LIMITS, KCL_DOSES, FLUID_LIBRARY

class InputValidationError(ValueError):
    """Raised when a required lab value is missing or outside its accepted range."""
    pass

class DataTypeError(TypeError):
    """Raised when inputs are wrong python types (str instead of float)."""
    pass

class ComputationError(RuntimeError):
    """Raised when plan generation fails on inputs that passed validation."""
    pass

class FailureKind(Enum):
    VALIDATION = "validation"
    COMPUTATION = "computation"

# --- 1. INPUT LAYER (Labs at presentation) ---

@dataclass(frozen=True)
class ClinicalSnapshot:
    """
    One set of bedside results for an infant with IHPS.
    Electrolytes in mmol/L, weight in kg. Optional labs are None when not measured.
    """
    sodium: float
    potassium: float
    chloride: float
    ph: float
    weight: float

    glucose: Optional[float] = None       # mmol/L
    creatinine: Optional[float] = None    # umol/L
    bun: Optional[float] = None           # mmol/L
    hematocrit: Optional[float] = None    # %
    lactate: Optional[float] = None       # mmol/L
    pco2: Optional[float] = None          # mmHg
    base_excess: Optional[float] = None   # mmol/L
    hco3: Optional[float] = None          # mmol/L
    urine_output: Optional[float] = None  # mL/kg/hr

    def __post_init__(self):
        # 1. Type Safety (prevent string math crashes)
        for name, (label, low, high, message) in LAB_LIMITS.REQUIRED.items():
            val = getattr(self, name)
            if val is None:
                raise InputValidationError(f"{label} is required")
            if isinstance(val, bool) or not isinstance(val, (int, float)):
                raise DataTypeError(f"Field '{name}' must be numeric, got {type(val)}")
            # 2. Range Checks (NaN fails the comparison too)
            if not (low <= val <= high):
                raise InputValidationError(message)

        for name in LAB_LIMITS.OPTIONAL:
            val = getattr(self, name)
            if val is None:
                continue
            if isinstance(val, bool) or not isinstance(val, (int, float)):
                raise DataTypeError(f"Field '{name}' must be numeric, got {type(val)}")
            if math.isnan(val):
                raise DataTypeError(f"Field '{name}' must be a number, got NaN")

@dataclass
class InputWarnings:
    """Tracks optional inputs that were not measured. Never changes the plan."""
    missing_optional_inputs: List[str] = field(default_factory=list)

    def messages(self) -> List[str]:
        return list(self.missing_optional_inputs)

@dataclass
class AuditLog:
    timestamp: str = field(default_factory=lambda: datetime.now().isoformat())
    action: str = "fluid_plan_creation"
    inputs_hash: int = 0
    model_version: str = VERSION

# --- 2. INTERMEDIATE DECISIONS ---

@dataclass(frozen=True)
class FluidRates:
    maintenance_ml_hr: float   # unrounded
    ihps_ml_hr: float          # unrounded, 1.5x maintenance

@dataclass(frozen=True)
class FluidSelection:
    base_fluid: FluidType
    kcl_meq_l: int
    reason: str

    @property
    def label(self) -> str:
        """Bedside label with the KCl dose baked in, e.g. 'D5 1/2 NS + 20 mEq/L KCl'."""
        if self.kcl_meq_l == KCL_DOSES.HELD:
            return self.base_fluid.value
        return f"{self.base_fluid.value} + {self.kcl_meq_l} mEq/L KCl"

    @property
    def description(self) -> str:
        return FLUID_LIBRARY.get(self.base_fluid).name

@dataclass(frozen=True)
class BolusRecommendation:
    volume: int          # mL/kg
    total_volume: int    # mL
    reason: str

# --- 3. OUTPUT LAYER (The Actionable Plan) ---

@dataclass(frozen=True)
class FluidPlan:
    """
    The final instructions displayed to the clinician.
    """
    # 1. The Prescription
    fluid_type: str
    fluid_selection_reason: str
    fluid_rate_per_hour: int     # mL/hr
    maintenance_rate: int        # mL/hr

    # 2. The Correction Window
    correction_time: int         # hours
    total_fluid_volume: int      # mL

    bolus_recommendation: BolusRecommendation

    # 3. Safety
    alerts: tuple = ()

    # 4. Monitoring
    recheck_interval: str = ""
    next_lab_check: str = ""

    # Summary for Quick Read
    human_readable_summary: str = ""

@dataclass
class PlanResult:
    """Standardized response format for API/UI."""
    success: bool
    plan: Optional[FluidPlan]
    errors: List[str]
    warnings: InputWarnings
    failure: Optional[FailureKind] = None
    audit_log: Optional[AuditLog] = None
