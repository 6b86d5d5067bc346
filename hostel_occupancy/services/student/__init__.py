from hostel_occupancy.services.student.student_service import StudentService

__all__ = ["StudentService"]
