"""
Service messages and audit action names.
"""

from typing import Final

# Audit actions
ACTION_ADD_STUDENT: Final[str] = "ADD_STUDENT"
ACTION_UPDATE_STUDENT: Final[str] = "UPDATE_STUDENT"
ACTION_DELETE_STUDENT: Final[str] = "DELETE_STUDENT"
ACTION_DELETE_BATCH: Final[str] = "BATCH_DELETE_STUDENTS"
ACTION_ADD_HOSTEL: Final[str] = "ADD_HOSTEL"
ACTION_UPDATE_HOSTEL: Final[str] = "UPDATE_HOSTEL"
ACTION_CASCADE_DELETE: Final[str] = "CASCADE_DELETE"
ACTION_IMPORT_ROOMS: Final[str] = "IMPORT_ROOMS"
ACTION_CREATE_CHALLAN: Final[str] = "CREATE_CHALLAN"
ACTION_PAYMENT: Final[str] = "PAYMENT"

# Audit entity types
ENTITY_STUDENT: Final[str] = "Student"
ENTITY_HOSTEL: Final[str] = "Hostel"
ENTITY_PAYMENT: Final[str] = "Payment"
ENTITY_SYSTEM: Final[str] = "System"

DEFAULT_ACTOR: Final[str] = "system"
DEFAULT_ROLE: Final[str] = "staff"

# Error messages
ERROR_HOSTEL_NOT_FOUND: Final[str] = "Hostel not found"
ERROR_STUDENT_NOT_FOUND: Final[str] = "Student not found"
ERROR_CHALLAN_NOT_FOUND: Final[str] = "Challan not found"
ERROR_NO_BATCH_MATCH: Final[str] = "No students found matching the criteria"

# Success messages
SUCCESS_ROSTER_BUILT: Final[str] = "Rooms retrieved successfully"
SUCCESS_ROOM_SELECTED: Final[str] = "Room selected successfully"
SUCCESS_CAPACITY_CHECKED: Final[str] = "Room capacity checked"
SUCCESS_HOSTEL_CREATED: Final[str] = "Hostel created successfully"
SUCCESS_HOSTEL_UPDATED: Final[str] = "Hostel updated successfully"
SUCCESS_HOSTEL_DELETED: Final[str] = "Hostel and associated data deleted successfully"
SUCCESS_HOSTELS_RETRIEVED: Final[str] = "Hostels retrieved successfully"
SUCCESS_LEGACY_IMPORTED: Final[str] = "Legacy room records imported"
SUCCESS_STUDENT_CREATED: Final[str] = "Student created successfully"
SUCCESS_STUDENT_UPDATED: Final[str] = "Student updated successfully"
SUCCESS_STUDENT_DELETED: Final[str] = "Student and related data deleted successfully"
SUCCESS_STUDENTS_RETRIEVED: Final[str] = "Students retrieved successfully"
SUCCESS_BATCH_DELETED: Final[str] = "Batch deleted successfully"
SUCCESS_CHALLAN_CREATED: Final[str] = "Challan created successfully"
SUCCESS_CHALLANS_RETRIEVED: Final[str] = "Challans retrieved successfully"
SUCCESS_PAYMENT_MARKED: Final[str] = "Payment marked successfully"
SUCCESS_FEE_STRUCTURE: Final[str] = "Fee structure retrieved successfully"
SUCCESS_LOG_CREATED: Final[str] = "Log created successfully"
SUCCESS_LOGS_RETRIEVED: Final[str] = "Logs retrieved successfully"
