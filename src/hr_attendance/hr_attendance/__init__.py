"""HR attendance package.

Organized by feature modules (attendance, employees, notifications, reports, ...)
with a thin Flask controller layer over service/repository layers.
"""
