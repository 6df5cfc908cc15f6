import pytest

from hydromon.errors import AccessError, ErrorKind
from hydromon.models import AuditLog, Device, DeviceStatus
from hydromon.services import devices as device_service


class TestListDevices:
    def test_only_own_devices(self, db, owner, devices):
        result = device_service.list_devices(db, owner)
        assert {d.id for d in result} == {devices["d1"].id, devices["d2"].id}

    def test_user_without_devices_gets_empty_list(self, db, admin, devices):
        assert device_service.list_devices(db, admin) == []

    def test_requires_session(self, db, devices):
        with pytest.raises(AccessError) as exc:
            device_service.list_devices(db, None)
        assert exc.value.kind == ErrorKind.UNAUTHENTICATED


class TestDeviceSummary:
    def test_counts_by_status(self, db, owner, devices):
        summary = device_service.device_summary(db, owner)
        assert summary.total == 2
        assert summary.active == 1
        assert summary.error == 1
        assert [d.id for d in summary.recent_alerts] == [devices["d2"].id]


class TestGetDevice:
    def test_detail_includes_recent_history(self, db, owner, devices, readings):
        detail = device_service.get_device(db, owner, devices["d1"].id)
        assert detail.id == devices["d1"].id
        assert detail.owner_id == owner.id
        assert len(detail.water_data) == 50
        assert len(detail.light_data) == 50
        assert len(detail.pump_logs) == 3
        timestamps = [w.timestamp for w in detail.water_data]
        assert timestamps == sorted(timestamps, reverse=True)

    def test_foreign_device_is_forbidden(self, db, other, devices):
        with pytest.raises(AccessError) as exc:
            device_service.get_device(db, other, devices["d1"].id)
        assert exc.value.kind == ErrorKind.FORBIDDEN

    def test_missing_device_is_not_found(self, db, owner, devices):
        with pytest.raises(AccessError) as exc:
            device_service.get_device(db, owner, "no-such-device")
        assert exc.value.kind == ErrorKind.NOT_FOUND


class TestUpdateDeviceStatus:
    def test_owner_can_set_maintenance(self, db, owner, devices):
        result = device_service.update_device_status(db, owner, devices["d1"].id, "MAINTENANCE")
        assert result.status == DeviceStatus.MAINTENANCE
        db.expire_all()
        assert db.get(Device, devices["d1"].id).status == DeviceStatus.MAINTENANCE

    def test_status_change_is_audited(self, db, owner, devices):
        device_service.update_device_status(db, owner, devices["d1"].id, DeviceStatus.INACTIVE)
        entry = db.query(AuditLog).filter(AuditLog.action == "device.status").one()
        assert entry.actor_user_id == owner.id
        assert entry.details == {"before": "ACTIVE", "after": "INACTIVE"}

    @pytest.mark.parametrize("status", ["ERROR", "BROKEN", None])
    def test_unsettable_status_is_rejected(self, db, owner, devices, status):
        with pytest.raises(AccessError) as exc:
            device_service.update_device_status(db, owner, devices["d1"].id, status)
        assert exc.value.kind == ErrorKind.VALIDATION_FAILED

    def test_non_owner_cannot_change_status(self, db, other, devices):
        with pytest.raises(AccessError) as exc:
            device_service.update_device_status(db, other, devices["d1"].id, "INACTIVE")
        assert exc.value.kind == ErrorKind.FORBIDDEN
        db.expire_all()
        assert db.get(Device, devices["d1"].id).status == DeviceStatus.ACTIVE
