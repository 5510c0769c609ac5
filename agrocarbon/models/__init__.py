# SQLModel database models

from agrocarbon.models.farmer import Farmer, FarmInput
from agrocarbon.models.credit import CarbonCredit
from agrocarbon.models.satellite import SatelliteVerification
from agrocarbon.models.audit import AuditLog

__all__ = [
    "Farmer",
    "FarmInput",
    "CarbonCredit",
    "SatelliteVerification",
    "AuditLog",
]
