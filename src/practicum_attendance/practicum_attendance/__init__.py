"""Practicum attendance package.

Organized by feature modules (agencies, practicums, attendance, scheduler, ...)
with a thin Flask controller layer over service/repository layers.
"""
