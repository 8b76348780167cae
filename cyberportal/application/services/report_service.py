import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from .access import require_role
from ..ports.report_repo import ReportRepository
from ..ports.user_repo import UserRepository
from ...exceptions import ValidationError
from ...models import ENTITY_TYPES, Role
from ...utils import generate_reference_id

logger = logging.getLogger(__name__)


def _blank(value: Optional[str]) -> bool:
    return not isinstance(value, str) or not value.strip()


def _evidence_count(evidence: Any) -> int:
    if evidence is None:
        return 0
    if isinstance(evidence, (list, tuple)):
        return len(evidence)
    return 1


@dataclass
class ReportService:
    user_repo: UserRepository
    report_repo: ReportRepository

    def report_grievance(self, user_id: str, complaint_category: Optional[str], description: Optional[str],
                         location: Optional[str], subcategory: Optional[str] = None,
                         location_area: Optional[str] = None, suspicious_entity: Optional[str] = None,
                         anonymity: bool = False, evidence: Any = None,
                         loss_amount: Optional[float] = None) -> Dict[str, Any]:
        require_role(self.user_repo, user_id, Role.USER)
        if _blank(complaint_category) or _blank(description) or _blank(location):
            raise ValidationError("Complaint category, description, and location are required")
        if loss_amount is not None and loss_amount < 0:
            raise ValidationError("Loss amount cannot be negative")

        report = self.report_repo.create_grievance(
            generate_reference_id("GR"),
            user_id,
            {
                "complaint_category": complaint_category.strip(),
                "subcategory": subcategory,
                "description": description.strip(),
                "location": location.strip(),
                "location_area": location_area,
                "suspicious_entity": suspicious_entity,
                "anonymity": bool(anonymity),
                "evidence": evidence,
                "evidence_count": _evidence_count(evidence),
                "loss_amount": loss_amount or 0.0,
            },
        )
        logger.info(f"Grievance {report.report_id} filed by user {user_id}")
        return {
            "report_id": report.report_id,
            "complaint_category": report.complaint_category,
            "subcategory": report.subcategory,
            "status": report.status,
            "created_at": report.created_at,
        }

    def report_suspicious(self, user_id: str, entity_type: Optional[str], entity_value: Optional[str],
                          encounter: Optional[str], description: Optional[str], evidence: Any = None,
                          additional_info: Optional[str] = None) -> Dict[str, Any]:
        require_role(self.user_repo, user_id, Role.USER)
        if _blank(entity_type) or _blank(entity_value) or _blank(encounter) or _blank(description):
            raise ValidationError("Entity type, entity value, encounter, and description are required")
        if entity_type not in ENTITY_TYPES:
            raise ValidationError(f"Invalid entity type. Must be one of: {', '.join(ENTITY_TYPES)}")

        value = entity_value.strip()
        similar = self.report_repo.bump_similar_entities(entity_type, value)
        entity = self.report_repo.create_suspicious_entity(
            generate_reference_id("SE"),
            user_id,
            {
                "entity_type": entity_type,
                "entity_value": value,
                "encounter": encounter.strip(),
                "description": description.strip(),
                "evidence": evidence,
                "evidence_count": _evidence_count(evidence),
                "additional_info": additional_info,
                "reported_by_count": similar + 1,
            },
        )
        if similar:
            logger.info(f"Entity {entity_type}:{value} has {similar} earlier report(s)")
        return {
            "entity_id": entity.entity_id,
            "entity_type": entity.entity_type,
            "status": entity.status,
            "threat_level": entity.threat_level,
            "similar_reports": similar,
            "created_at": entity.created_at,
        }
