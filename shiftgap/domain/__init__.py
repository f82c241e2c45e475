"""
Domain Layer

Business rules of the staffing gap engine, independent of storage.

Components:
- staffing/: demand, assignments, station requirements and the gap engine
"""
