# safety.py
from typing import Tuple
from models import ClinicalSnapshot
from constants import ALERT_THRESHOLDS

class AlertGenerator:
    """
    Threshold checks on the presenting labs.
    Each check adds at most one message; order of the checks is the order of the output.
    """
    @staticmethod
    def generate_alerts(snapshot: ClinicalSnapshot) -> Tuple[str, ...]:
        alerts = []

        # 1. Potassium (critical)
        if snapshot.potassium < ALERT_THRESHOLDS.POTASSIUM_LOW:
            alerts.append("CRITICAL: Severe hypokalaemia - aggressive KCl needed")
        if snapshot.potassium > ALERT_THRESHOLDS.POTASSIUM_HIGH:
            alerts.append("CRITICAL: Hyperkalaemia risk - hold KCl, monitor closely")

        # 2. Sodium / Chloride depletion
        if snapshot.sodium < ALERT_THRESHOLDS.SODIUM_LOW:
            alerts.append("WARNING: Severe hyponatremia - use NS + 5% Dextrose")
        if snapshot.chloride < ALERT_THRESHOLDS.CHLORIDE_LOW:
            alerts.append("WARNING: Severe hypochloremia - expect longer correction time")

        # 3. Metabolic alkalosis
        if snapshot.ph > ALERT_THRESHOLDS.PH_HIGH:
            alerts.append("WARNING: Severe alkalosis - slow correction needed")

        return tuple(alerts)
