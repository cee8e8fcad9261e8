import unittest
from unittest.mock import patch
from fastapi.testclient import TestClient

from pydantic.alias_generators import to_camel

from main import app, CalculationRequest, BolusResponse, CalculationResponse
from safety import AlertGenerator

class TestCalculateEndpoint(unittest.TestCase):

    def setUp(self):
        self.client = TestClient(app)
        self.payload = {"sodium": 129, "potassium": 2.8, "chloride": 67, "ph": 7.4, "weight": 3.2}

    def test_01_plan_returned_in_camel_case(self):
        response = self.client.post("/calculate", json=self.payload)
        self.assertEqual(response.status_code, 200)
        body = response.json()

        self.assertTrue(body["success"])
        self.assertEqual(body["fluidType"], "NS + 5% Dextrose + 40 mEq/L KCl")
        self.assertEqual(body["fluidRatePerHour"], 19)
        self.assertEqual(body["maintenanceRate"], 13)
        self.assertEqual(body["correctionTime"], 36)
        self.assertEqual(body["totalFluidVolume"], 691)
        self.assertEqual(body["bolusRecommendation"]["volume"], 20)
        self.assertEqual(body["bolusRecommendation"]["totalVolume"], 64)
        self.assertEqual(len(body["alerts"]), 3)
        self.assertEqual(body["recheckInterval"], "24 hours")
        self.assertIn("nextLabCheck", body)
        self.assertIn("summary", body)
        self.assertEqual(len(body["warnings"]), 3)

    def test_02_optional_fields_accepted(self):
        payload = dict(self.payload, glucose=2.0, hct=55, lactate=1.0, be=8, hco3=32,
                       pco2=48, creatinine=40, bun=3.1, urineOutput=1)
        response = self.client.post("/calculate", json=payload)
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["fluidType"], "D10 1/2 NS + 40 mEq/L KCl")
        self.assertEqual(body["warnings"], [])

    def test_03_out_of_range_is_field_specific(self):
        response = self.client.post("/calculate", json=dict(self.payload, weight=12))
        self.assertEqual(response.status_code, 422)
        self.assertEqual(response.json(), {"success": False, "error": "Weight must be between 1.0-10.0 kg"})

    def test_04_missing_required_field(self):
        response = self.client.post("/calculate", json={"potassium": 4.0})
        self.assertEqual(response.status_code, 422)
        self.assertEqual(response.json()["error"], "Sodium is required")

    def test_05_non_numeric_value(self):
        response = self.client.post("/calculate", json=dict(self.payload, sodium="high"))
        self.assertEqual(response.status_code, 422)
        body = response.json()
        self.assertFalse(body["success"])
        self.assertEqual(body["error"], "Invalid input: sodium must be numeric")

    def test_06_engine_failure_hides_internals(self):
        with patch.object(AlertGenerator, "generate_alerts", side_effect=ZeroDivisionError("secret")):
            response = self.client.post("/calculate", json=self.payload)
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {"success": False, "error": "An error occurred during calculation"})

class TestSchemaConfig(unittest.TestCase):

    def test_request_accepts_alias_and_field_name(self):
        self.assertEqual(CalculationRequest(urineOutput=1.5).urine_output, 1.5)
        self.assertEqual(CalculationRequest(urine_output=1.5).urine_output, 1.5)

    def test_models_use_config_dict(self):
        for model in (CalculationRequest, BolusResponse, CalculationResponse):
            self.assertTrue(model.model_config.get("populate_by_name"), model.__name__)
        self.assertIs(CalculationResponse.model_config["alias_generator"], to_camel)
        dumped = BolusResponse(volume=10, total_volume=40, reason="x").model_dump(by_alias=True)
        self.assertEqual(dumped, {"volume": 10, "totalVolume": 40, "reason": "x"})

class TestServiceEndpoints(unittest.TestCase):

    def setUp(self):
        self.client = TestClient(app)

    def test_health(self):
        body = self.client.get("/health").json()
        self.assertEqual(body["status"], "active")
        self.assertEqual(body["module"], "ihps-fluid-engine")

    def test_root(self):
        self.assertEqual(self.client.get("/").status_code, 200)

if __name__ == '__main__':
    unittest.main()
