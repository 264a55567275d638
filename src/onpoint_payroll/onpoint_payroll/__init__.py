"""OnPoint payroll package.

Feature modules (attendance, policies, employees, payroll) with a thin Flask
controller layer over service/repository layers. The attendance-to-payroll
engine (reconciliation, aggregation, pay calculation) is pure and has no
database or HTTP dependency.
"""
