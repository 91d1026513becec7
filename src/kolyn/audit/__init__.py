"""Audit engine: evaluate skill check rules against a project."""

from kolyn.audit.engine import audit, audit_skill, evaluate_rules
from kolyn.audit.manifest import ProjectManifest, load_manifest
from kolyn.audit.models import AuditResult, CheckKind, CheckOutcome, SkillAudit

__all__ = [
    "AuditResult",
    "CheckKind",
    "CheckOutcome",
    "ProjectManifest",
    "SkillAudit",
    "audit",
    "audit_skill",
    "evaluate_rules",
    "load_manifest",
]
