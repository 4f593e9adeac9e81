"""Client-side draft validators, one per resource."""

from console.validators.form_validators import (
    Validator,
    validate_customer,
    validate_job,
    validate_refund,
    validate_stock_item,
    validate_technician,
    validate_warranty,
)

__all__ = [
    "Validator",
    "validate_customer",
    "validate_job",
    "validate_refund",
    "validate_stock_item",
    "validate_technician",
    "validate_warranty",
]
