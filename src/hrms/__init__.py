"""HRMS ledger package.

Organized by feature modules (employees, attendance, leaves, payroll, ...)
with a thin Flask controller layer over service/repository layers. The
attendance, leave and payroll modules hold the accrual rules; the rest is
the plumbing they need.
"""
