"""Class Attendance package.

Lecturers open class sessions bound to a location; students claim attendance
with a device reading that is verified against it. Organized by feature
modules (location, integrity, sessions, attendance) with a thin Flask
controller layer over service/repository layers.
"""
