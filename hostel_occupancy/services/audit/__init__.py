from hostel_occupancy.services.audit.audit_log_service import AuditLogService

__all__ = ["AuditLogService"]
