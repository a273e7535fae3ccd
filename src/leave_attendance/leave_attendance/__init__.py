"""Leave & attendance lifecycle engine.

The package is organized by feature modules (attendance, leaves) with a thin
Flask JSON controller layer on top of service/repository layers. Employees are
referenced by id only; identity records live outside this package.
"""
