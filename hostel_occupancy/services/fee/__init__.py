from hostel_occupancy.services.fee.challan_numbers import generate_challan_number
from hostel_occupancy.services.fee.fee_service import (
    FeeService,
    challan_due_date,
    challan_status,
    fee_table_view,
    has_pending_fees,
    max_semesters,
    semester_key,
)

__all__ = [
    "FeeService",
    "challan_due_date",
    "challan_status",
    "fee_table_view",
    "generate_challan_number",
    "has_pending_fees",
    "max_semesters",
    "semester_key",
]
