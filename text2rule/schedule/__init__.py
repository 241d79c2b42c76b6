"""Schedule descriptor parsing and schedule DSL generation."""

from .extractor import ScheduleExtractor, ExtractionMode
from .serializer import (
    ScheduleSerializer,
    to_map,
    to_dsl,
    format_time,
    normalize_boolean,
    build_monthly_date_field,
)
from .typed_dsl import generate_typed_dsl

__all__ = [
    "ScheduleExtractor",
    "ExtractionMode",
    "ScheduleSerializer",
    "to_map",
    "to_dsl",
    "format_time",
    "normalize_boolean",
    "build_monthly_date_field",
    "generate_typed_dsl",
]
