"""Class Attendance package.

Organized by feature modules (attendance, classes, teachers, feedback, ...)
with a thin Flask controller layer over async service/repository layers.
"""
