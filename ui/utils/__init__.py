"""UI utilities (validators, id generation, etc.)."""

from .id_generator import generate_course_id, generate_instructor_id

__all__ = ["generate_course_id", "generate_instructor_id"]
