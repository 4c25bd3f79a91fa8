"""Class attendance package.

This package is organized by feature modules (timetable, attendance, reports,
notices, directory) with a thin Flask controller layer and service/repository
layers underneath.
"""
