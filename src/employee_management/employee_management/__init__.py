"""Employee Management package.

This package is organized by feature modules (employees, leaves, faces,
attendance) with a thin Flask controller layer and service/repository layers.
"""
