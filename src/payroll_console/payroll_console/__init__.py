"""Payroll Console package.

Organized by feature modules (employees, loans, integrity, payroll, leaves)
with a thin Flask controller layer over service/repository layers.
"""
