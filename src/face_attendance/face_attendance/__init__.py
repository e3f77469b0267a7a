"""Face attendance core package.

This package is organized by feature modules (matching, liveness, attendance,
workhours, ...) with a thin Flask controller layer and service/repository layers.
"""
