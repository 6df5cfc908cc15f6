"""Alert rule operations. Rules are stored only; evaluation happens elsewhere."""
import logging
from typing import Any, Mapping, Union

from sqlalchemy.orm import Session

from hydromon.access import DEVICE, Principal, guarded, validate_input
from hydromon.audit import entity_to_dict, log_action
from hydromon.models import AlertRule
from hydromon.schemas import AlertRuleCreate, AlertRuleResponse

logger = logging.getLogger(__name__)


@guarded()
def create_alert_rule(
    db: Session,
    principal: Principal,
    data: Union[AlertRuleCreate, Mapping[str, Any]],
) -> AlertRuleResponse:
    data = validate_input(AlertRuleCreate, data)
    device = DEVICE.resolve(db, principal, data.device_id)

    rule = AlertRule(
        owner_id=principal.id,
        device_id=device.id,
        name=data.name,
        description=data.description,
        condition=data.condition.model_dump(mode="json"),
        severity=data.severity,
    )
    db.add(rule)
    db.flush()
    log_action(db, principal, "alert_rule.create", "alert_rule", rule.id, entity_to_dict(rule))
    db.commit()
    db.refresh(rule)
    logger.info("Alert rule %s created for device %s", rule.id, device.id)
    return AlertRuleResponse.model_validate(rule)


@guarded()
def list_alert_rules(db: Session, principal: Principal, device_id: str) -> list[AlertRuleResponse]:
    device = DEVICE.resolve(db, principal, device_id)
    rules = (
        db.query(AlertRule)
        .filter(AlertRule.device_id == device.id)
        .order_by(AlertRule.created_at.desc())
        .all()
    )
    return [AlertRuleResponse.model_validate(r) for r in rules]
