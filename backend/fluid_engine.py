"""
IHPS Fluid Calculator: Plan Engine
==================================
Turns one validated lab snapshot into a complete fluid plan:
rates -> fluid choice -> bolus -> correction time -> alerts -> plan.

Every step is a pure function of the same ClinicalSnapshot, so plans can be
generated concurrently without coordination.
"""

import logging
from dataclasses import fields
from typing import Optional

from models import (
    ClinicalSnapshot,
    FluidRates,
    FluidSelection,
    BolusRecommendation,
    FluidPlan,
    PlanResult,
    InputWarnings,
    AuditLog,
    FailureKind,
    InputValidationError,
    DataTypeError,
    ComputationError
)
from constants import RATE_CONSTANTS, CORRECTION_RULES
from protocols import FluidSelector, BolusCalculator, round_half_up
from safety import AlertGenerator

logger = logging.getLogger("ihps-fluid-engine")

COMPUTATION_FAILURE_MESSAGE = "An error occurred during calculation"

class IHPSFluidEngine:
    """
    The Decision Core.
    Translates Lab Snapshot -> Rates, Fluid, Bolus, Correction Window -> FluidPlan.
    """

    @staticmethod
    def calculate_rates(weight_kg: float) -> FluidRates:
        """
        Hourly maintenance (4/2 mL/kg/hr) and the IHPS rate (1.5x).
        The 1.5x is applied to the per-kg constants so both branches meet at 10 kg.
        """
        rc = RATE_CONSTANTS
        if weight_kg <= rc.BREAKPOINT_KG:
            maintenance = weight_kg * rc.MAINTENANCE_FIRST_10KG
            ihps = weight_kg * rc.IHPS_FIRST_10KG
        else:
            excess = weight_kg - rc.BREAKPOINT_KG
            maintenance = (rc.BREAKPOINT_KG * rc.MAINTENANCE_FIRST_10KG) + (excess * rc.MAINTENANCE_ABOVE_10KG)
            ihps = (rc.BREAKPOINT_KG * rc.IHPS_FIRST_10KG) + (excess * rc.IHPS_ABOVE_10KG)

        return FluidRates(maintenance_ml_hr=maintenance, ihps_ml_hr=ihps)

    @staticmethod
    def estimate_correction_time(sodium: float, chloride: float, ph: float, weight_kg: float) -> int:
        """
        Hours budgeted before the electrolytes are expected to normalise.
        Sodium sets the starting value; chloride and pH can only raise it;
        small infants get a flat penalty on top.
        """
        rules = CORRECTION_RULES

        # 1. Sodium (absolute)
        if sodium < rules.SODIUM_SEVERE[0]:
            hours = rules.SODIUM_SEVERE[1]
        elif sodium < rules.SODIUM_MODERATE[0]:
            hours = rules.SODIUM_MODERATE[1]
        else:
            hours = rules.BASE_HOURS

        # 2. Chloride (floor)
        if chloride < rules.CHLORIDE_SEVERE[0]:
            hours = max(hours, rules.CHLORIDE_SEVERE[1])
        elif chloride < rules.CHLORIDE_MODERATE[0]:
            hours = max(hours, rules.CHLORIDE_MODERATE[1])

        # 3. Alkalosis (floor)
        if ph > rules.PH_SEVERE[0]:
            hours = max(hours, rules.PH_SEVERE[1])
        elif ph > rules.PH_MODERATE[0]:
            hours = max(hours, rules.PH_MODERATE[1])

        # 4. Small infants
        if weight_kg < rules.LOW_WEIGHT_KG:
            hours += rules.LOW_WEIGHT_PENALTY_HOURS

        return hours

    @staticmethod
    def recheck_interval(correction_time: int) -> str:
        if correction_time <= CORRECTION_RULES.RECHECK_CUTOFF_HOURS:
            return "12 hours"
        return "24 hours"

    @staticmethod
    def next_lab_check(correction_time: int) -> str:
        if correction_time <= CORRECTION_RULES.RECHECK_CUTOFF_HOURS:
            return "Next lab check in 12 hours (critical first 24 hours)"
        return "Next lab check in 24 hours (monitoring improvement)"

    @staticmethod
    def _build_summary(selection: FluidSelection, rate: int, correction_time: int,
                       total_volume: int, bolus: BolusRecommendation, recheck: str) -> str:
        summary = (f"Give {selection.label} ({selection.description}) at {rate} mL/hr "
                   f"for {correction_time} hours ({total_volume} mL).")
        if bolus.volume > 0:
            summary += f" Bolus {bolus.volume} mL/kg NS ({bolus.total_volume} mL) first."
        else:
            summary += " No bolus."
        summary += f" Recheck labs in {recheck}."
        return summary

    @staticmethod
    def generate_plan(snapshot: ClinicalSnapshot) -> FluidPlan:
        """
        MASTER BUILDER: assembles the FluidPlan for one snapshot.
        Raises ComputationError if anything fails after validation; never returns a partial plan.
        """
        try:
            rates = IHPSFluidEngine.calculate_rates(snapshot.weight)
            selection = FluidSelector.select_fluid(snapshot)
            bolus = BolusCalculator.calculate_bolus(snapshot)
            correction_time = IHPSFluidEngine.estimate_correction_time(
                snapshot.sodium, snapshot.chloride, snapshot.ph, snapshot.weight
            )
            alerts = AlertGenerator.generate_alerts(snapshot)

            fluid_rate = round_half_up(rates.ihps_ml_hr)
            # Total uses the unrounded hourly rate
            total_volume = round_half_up(rates.ihps_ml_hr * correction_time)
            recheck = IHPSFluidEngine.recheck_interval(correction_time)
        except (ArithmeticError, TypeError, ValueError) as e:
            raise ComputationError(str(e)) from e

        logger.debug("Selected %s, correction %dh, bolus %d mL/kg",
                     selection.label, correction_time, bolus.volume)

        return FluidPlan(
            fluid_type=selection.label,
            fluid_selection_reason=selection.reason,
            fluid_rate_per_hour=fluid_rate,
            maintenance_rate=round_half_up(rates.maintenance_ml_hr),
            correction_time=correction_time,
            total_fluid_volume=total_volume,
            bolus_recommendation=bolus,
            alerts=alerts,
            recheck_interval=recheck,
            next_lab_check=IHPSFluidEngine.next_lab_check(correction_time),
            human_readable_summary=IHPSFluidEngine._build_summary(
                selection, fluid_rate, correction_time, total_volume, bolus, recheck
            ),
        )

    @staticmethod
    def _build_snapshot(data: dict) -> ClinicalSnapshot:
        if not isinstance(data, dict):
            raise InputValidationError("Input must be a mapping of field name to value")
        known = {f.name for f in fields(ClinicalSnapshot)}
        unknown = sorted(str(name) for name in set(data) - known)
        if unknown:
            raise InputValidationError(f"Unknown field(s): {', '.join(unknown)}")
        missing = {name: None for name in known if name not in data}
        return ClinicalSnapshot(**{**missing, **data})

    @staticmethod
    def _check_input_quality(snapshot: ClinicalSnapshot) -> InputWarnings:
        warnings = InputWarnings()
        if snapshot.glucose is None:
            warnings.missing_optional_inputs.append(
                "Glucose not measured - fluid choice assumes normoglycaemia")
        if snapshot.hematocrit is None:
            warnings.missing_optional_inputs.append(
                "Hematocrit not measured - bolus not adjusted for haemoconcentration")
        if snapshot.lactate is None:
            warnings.missing_optional_inputs.append(
                "Lactate not measured - bolus not adjusted for perfusion")
        return warnings

    @staticmethod
    def create_plan(data: dict) -> PlanResult:
        """
        SAFE FACTORY: The main entry point for the API.
        Handles validation, plan generation and error formatting. Never raises.
        """
        warnings = InputWarnings()
        audit = None
        failure: Optional[FailureKind] = None

        try:
            audit = AuditLog(inputs_hash=hash(str(data)))

            # 1. Build the snapshot (validates types and ranges)
            snapshot = IHPSFluidEngine._build_snapshot(data)

            # 2. Input Quality Checks
            warnings = IHPSFluidEngine._check_input_quality(snapshot)

            # 3. Run the Engine
            plan = IHPSFluidEngine.generate_plan(snapshot)

            return PlanResult(
                success=True,
                plan=plan,
                errors=[],
                warnings=warnings,
                audit_log=audit
            )

        except (InputValidationError, DataTypeError) as e:
            errors = [str(e)]
            failure = FailureKind.VALIDATION
        except ComputationError as e:
            logger.error(f"Plan generation failed: {e}", exc_info=True)
            errors = [COMPUTATION_FAILURE_MESSAGE]
            failure = FailureKind.COMPUTATION
        except Exception as e:
            logger.error(f"Unexpected engine failure: {e}", exc_info=True)
            errors = [COMPUTATION_FAILURE_MESSAGE]
            failure = FailureKind.COMPUTATION

        return PlanResult(
            success=False,
            plan=None,
            errors=errors,
            warnings=warnings,
            failure=failure,
            audit_log=audit
        )
