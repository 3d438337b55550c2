"""Reimbursement calculators — base amount, depreciation, installments."""

from reimburse.calculators.depreciation import calculate_depreciation
from reimburse.calculators.installments import apply_processing, build_installment_schedule
from reimburse.calculators.reimbursement import compute_base_reimbursement

__all__ = [
    "compute_base_reimbursement",
    "calculate_depreciation",
    "apply_processing",
    "build_installment_schedule",
]
