# main.py

import logging
from typing import Optional, List
from datetime import datetime
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from models import FluidPlan, PlanResult, FailureKind
from constants import VERSION
from config import settings
from fluid_engine import IHPSFluidEngine, COMPUTATION_FAILURE_MESSAGE

# --- 1. CONFIGURATION & LOGGING ---
logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger("ihps-fluid-api")

app = FastAPI(
    title="IHPS Fluid Calculator API",
    version=VERSION,
    description="Fluid and electrolyte plan for infants with hypertrophic pyloric stenosis. \n\n"
                "**WARNING**: Decision Support Tool Only. Not for autonomous clinical use.",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.get("/")
def read_root():
    return {"status": "active", "message": "IHPS Fluid Calculator API is running successfully!"}

@app.get("/health")
def health_check():
    """K8s/AWS Health Probe"""
    return {"status": "active", "version": VERSION, "module": "ihps-fluid-engine"}

# --- 2. INPUT SCHEMA ---
# Types only. Ranges are enforced by ClinicalSnapshot so the messages stay field specific.
class CalculationRequest(BaseModel):
    sodium: Optional[float] = Field(None, description="Serum sodium (mmol/L), 120-155")
    potassium: Optional[float] = Field(None, description="Serum potassium (mmol/L), 2.0-8.0")
    chloride: Optional[float] = Field(None, description="Serum chloride (mmol/L), 60-120")
    ph: Optional[float] = Field(None, description="Blood pH, 7.0-7.7")
    weight: Optional[float] = Field(None, description="Weight (kg), 1.0-10.0")

    glucose: Optional[float] = Field(None, description="Blood glucose (mmol/L)")
    pco2: Optional[float] = Field(None)
    hct: Optional[float] = Field(None, description="Hematocrit (%)")
    lactate: Optional[float] = Field(None, description="Lactate (mmol/L)")
    be: Optional[float] = Field(None, description="Base excess (mmol/L)")
    hco3: Optional[float] = Field(None)
    creatinine: Optional[float] = Field(None)
    bun: Optional[float] = Field(None)
    urine_output: Optional[float] = Field(None, alias="urineOutput")

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "sodium": 129, "potassium": 2.8, "chloride": 67,
                "ph": 7.4, "weight": 3.2
            }
        },
    )

    def to_engine_input(self) -> dict:
        return {
            "sodium": self.sodium, "potassium": self.potassium,
            "chloride": self.chloride, "ph": self.ph, "weight": self.weight,
            "glucose": self.glucose, "creatinine": self.creatinine, "bun": self.bun,
            "hematocrit": self.hct, "lactate": self.lactate, "pco2": self.pco2,
            "base_excess": self.be, "hco3": self.hco3,
            "urine_output": self.urine_output,
        }

# --- 3. EXPLICIT RESPONSE SCHEMA (The Contract) ---
class BolusResponse(BaseModel):
    volume: int
    total_volume: int
    reason: str

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

class CalculationResponse(BaseModel):
    success: bool = True
    fluid_type: str
    fluid_selection_reason: str
    fluid_rate_per_hour: int
    maintenance_rate: int
    correction_time: int
    total_fluid_volume: int
    bolus_recommendation: BolusResponse
    alerts: List[str]
    recheck_interval: str
    next_lab_check: str

    # UX
    summary: str
    warnings: List[str]
    generated_at: datetime = Field(default_factory=datetime.now)

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @classmethod
    def from_result(cls, result: PlanResult) -> "CalculationResponse":
        plan: FluidPlan = result.plan
        bolus = plan.bolus_recommendation
        return cls(
            fluid_type=plan.fluid_type,
            fluid_selection_reason=plan.fluid_selection_reason,
            fluid_rate_per_hour=plan.fluid_rate_per_hour,
            maintenance_rate=plan.maintenance_rate,
            correction_time=plan.correction_time,
            total_fluid_volume=plan.total_fluid_volume,
            bolus_recommendation=BolusResponse(
                volume=bolus.volume, total_volume=bolus.total_volume, reason=bolus.reason
            ),
            alerts=list(plan.alerts),
            recheck_interval=plan.recheck_interval,
            next_lab_check=plan.next_lab_check,
            summary=plan.human_readable_summary,
            warnings=result.warnings.messages(),
        )

def failure_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message})

@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    # Non-numeric values or a non-object body never reach the engine
    bad_fields = [str(err["loc"][-1]) for err in exc.errors() if len(err.get("loc", ())) > 1]
    message = "Invalid input"
    if bad_fields:
        message = f"Invalid input: {', '.join(bad_fields)} must be numeric"
    logger.warning(f"Request Validation Error: {message}")
    return failure_response(422, message)

# --- 4. ENDPOINTS ---

@app.post("/calculate", response_model=CalculationResponse, response_model_by_alias=True)
def calculate(request: CalculationRequest):
    """
    Generates the IHPS fluid plan (fluid, KCl, rate, bolus, correction window, alerts).
    """
    logger.info(f"Processing fluid plan for Wt: {request.weight}kg, "
                f"Na: {request.sodium}, K: {request.potassium}, Cl: {request.chloride}, pH: {request.ph}")

    result = IHPSFluidEngine.create_plan(request.to_engine_input())

    if result.success:
        return CalculationResponse.from_result(result)

    if result.failure == FailureKind.VALIDATION:
        logger.warning(f"Clinical Validation Error: {result.errors[0]}")
        return failure_response(422, result.errors[0])

    # Internals never leave the engine
    audit_hash = result.audit_log.inputs_hash if result.audit_log else None
    logger.error(f"Internal Engine Failure (audit hash {audit_hash})")
    return failure_response(500, COMPUTATION_FAILURE_MESSAGE)

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)
