import pytest

from hydromon.access import ALERT_RULE, DEVICE, LIGHT_DATA, PUMP_LOG, WATER_DATA, OwnershipRule
from hydromon.errors import AccessError, ErrorKind
from hydromon.models import AlertRule, Device, LightData, PumpLog, Severity, WaterData


@pytest.fixture
def owned(db, devices, readings):
    """One resource per rule, all belonging (directly or via d1) to the owner."""
    d1 = devices["d1"]
    rule = AlertRule(
        owner_id=d1.owner_id, device_id=d1.id, name="High temp",
        condition={"metric": "temperature", "operator": ">", "threshold": 30.0},
        severity=Severity.HIGH,
    )
    db.add(rule)
    db.commit()
    return {
        "device": d1.id,
        "alert_rule": rule.id,
        "water_data": db.query(WaterData.id).filter(WaterData.device_id == d1.id).first().id,
        "light_data": db.query(LightData.id).filter(LightData.device_id == d1.id).first().id,
        "pump_log": db.query(PumpLog.id).filter(PumpLog.device_id == d1.id).first().id,
    }


RULES = [
    ("device", DEVICE, "missing-device"),
    ("alert_rule", ALERT_RULE, "missing-rule"),
    ("water_data", WATER_DATA, 999999),
    ("light_data", LIGHT_DATA, 999999),
    ("pump_log", PUMP_LOG, 999999),
]


class TestOwnershipRules:
    @pytest.mark.parametrize("key,rule,_missing", RULES)
    def test_owner_is_granted(self, db, owner, owned, key, rule, _missing):
        resource = rule.resolve(db, owner, owned[key])
        assert resource.id == owned[key]

    @pytest.mark.parametrize("key,rule,_missing", RULES)
    def test_non_owner_is_forbidden(self, db, other, owned, key, rule, _missing):
        with pytest.raises(AccessError) as exc:
            rule.resolve(db, other, owned[key])
        assert exc.value.kind == ErrorKind.FORBIDDEN

    @pytest.mark.parametrize("key,rule,missing", RULES)
    def test_missing_resource_is_not_found_for_anyone(self, db, owner, other, owned, key, rule, missing):
        for principal in (owner, other):
            with pytest.raises(AccessError) as exc:
                rule.resolve(db, principal, missing)
            assert exc.value.kind == ErrorKind.NOT_FOUND

    @pytest.mark.parametrize("blank", [None, ""])
    def test_blank_id_is_not_found(self, db, owner, blank):
        with pytest.raises(AccessError) as exc:
            DEVICE.resolve(db, owner, blank)
        assert exc.value.kind == ErrorKind.NOT_FOUND

    def test_admin_has_no_bypass(self, db, admin, owned):
        with pytest.raises(AccessError) as exc:
            DEVICE.resolve(db, admin, owned["device"])
        assert exc.value.kind == ErrorKind.FORBIDDEN

    def test_parent_owned_rule_follows_foreign_key(self, db, owner, other, owned):
        rule_via_device = OwnershipRule(AlertRule, parent=DEVICE, via="device_id")
        assert rule_via_device.resolve(db, owner, owned["alert_rule"]).id == owned["alert_rule"]
        with pytest.raises(AccessError) as exc:
            rule_via_device.resolve(db, other, owned["alert_rule"])
        assert exc.value.kind == ErrorKind.FORBIDDEN

    def test_dangling_parent_is_not_found(self, db, owner):
        orphan = WaterData(device_id="gone", temperature=1, ph=7, dissolved_oxygen=1, turbidity=1)
        with pytest.raises(AccessError) as exc:
            WATER_DATA.owner_of(db, orphan)
        assert exc.value.kind == ErrorKind.NOT_FOUND
        assert exc.value.message == "Device not found"


class TestRuleConstruction:
    def test_needs_exactly_one_source_of_ownership(self):
        with pytest.raises(ValueError):
            OwnershipRule(Device)
        with pytest.raises(ValueError):
            OwnershipRule(Device, owner_column="owner_id", parent=DEVICE, via="id")

    def test_parent_needs_foreign_key(self):
        with pytest.raises(ValueError):
            OwnershipRule(WaterData, parent=DEVICE)
