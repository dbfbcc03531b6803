"""Validation and anomaly detection over predicted prices."""

from .detector import confidence_for, merge_results, validate_contract_ages, validate_pool, validate_price

__all__ = ["confidence_for", "merge_results", "validate_contract_ages", "validate_pool", "validate_price"]
