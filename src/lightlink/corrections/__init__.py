"""Light-time corrections for lightlink."""

from lightlink.corrections.ionospheric import IonosphericCorrection
from lightlink.corrections.relativistic import (
    FirstOrderRelativisticCorrection,
    shapiro_delay,
)
from lightlink.corrections.tropospheric import TroposphericCorrection
from lightlink.corrections.user_defined import UserDefinedCorrection

__all__ = [
    "FirstOrderRelativisticCorrection",
    "IonosphericCorrection",
    "TroposphericCorrection",
    "UserDefinedCorrection",
    "shapiro_delay",
]
