from hydromon.access.principal import Principal
from hydromon.access.guard import Capability, require
from hydromon.access.ownership import OwnershipRule, DEVICE, ALERT_RULE, WATER_DATA, LIGHT_DATA, PUMP_LOG
from hydromon.access.operation import guarded, public, persistence_boundary, validate_input

__all__ = [
    "Principal", "Capability", "require",
    "OwnershipRule", "DEVICE", "ALERT_RULE", "WATER_DATA", "LIGHT_DATA", "PUMP_LOG",
    "guarded", "public", "persistence_boundary", "validate_input",
]
