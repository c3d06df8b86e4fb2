from fifa_tracker.validation.rules import TABLE_RULES, FieldRule
from fifa_tracker.validation.sanitizer import sanitize
from fifa_tracker.validation.validator import ValidationResult, Validator

__all__ = ["TABLE_RULES", "FieldRule", "ValidationResult", "Validator", "sanitize"]
