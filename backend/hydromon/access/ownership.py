"""Ownership resolution shared by every device-scoped operation.

A rule either reads the owner straight off the resource (``owner_column``)
or walks up to a parent resource through a foreign key (``parent`` +
``via``). Parents are always loaded before any comparison is made, and a
missing resource at any hop is reported as NOT_FOUND before ownership is
considered.
"""
from typing import Any, Optional

from sqlalchemy.orm import Session

from hydromon.access.principal import Principal
from hydromon.errors import AccessError, ErrorKind
from hydromon.models import AlertRule, Device, LightData, PumpLog, WaterData


class OwnershipRule:
    def __init__(
        self,
        model: type,
        *,
        owner_column: Optional[str] = None,
        parent: Optional["OwnershipRule"] = None,
        via: Optional[str] = None,
        label: Optional[str] = None,
    ) -> None:
        if (owner_column is None) == (parent is None):
            raise ValueError("OwnershipRule needs exactly one of owner_column or parent")
        if parent is not None and via is None:
            raise ValueError("Parent-owned rules need the foreign key column in 'via'")
        self.model = model
        self.owner_column = owner_column
        self.parent = parent
        self.via = via
        self.label = label or model.__name__

    def __repr__(self) -> str:
        return f"OwnershipRule({self.label})"

    def load(self, db: Session, resource_id: Any) -> Any:
        if resource_id is None or resource_id == "":
            raise AccessError(ErrorKind.NOT_FOUND, f"{self.label} not found")
        resource = db.get(self.model, resource_id)
        if resource is None:
            raise AccessError(ErrorKind.NOT_FOUND, f"{self.label} not found")
        return resource

    def owner_of(self, db: Session, resource: Any) -> str:
        if self.owner_column is not None:
            return getattr(resource, self.owner_column)
        parent = self.parent.load(db, getattr(resource, self.via))
        return self.parent.owner_of(db, parent)

    def resolve(self, db: Session, principal: Principal, resource_id: Any) -> Any:
        """Load the resource and return it if ``principal`` owns it."""
        resource = self.load(db, resource_id)
        if self.owner_of(db, resource) != principal.id:
            raise AccessError(
                ErrorKind.FORBIDDEN,
                f"You don't have permission to access this {self.label.lower()}",
            )
        return resource


DEVICE = OwnershipRule(Device, owner_column="owner_id", label="Device")
ALERT_RULE = OwnershipRule(AlertRule, owner_column="owner_id", label="Alert rule")
WATER_DATA = OwnershipRule(WaterData, parent=DEVICE, via="device_id", label="Water data")
LIGHT_DATA = OwnershipRule(LightData, parent=DEVICE, via="device_id", label="Light data")
PUMP_LOG = OwnershipRule(PumpLog, parent=DEVICE, via="device_id", label="Pump log")
