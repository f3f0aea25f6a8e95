"""Scheduling & recommendation engine of the telecare portal.

Three components are exposed:
- availability: bookable slots from working hours minus existing appointments
- recommendation: multi-criteria ranking of doctors against a diagnostic report
- booking: re-validation and persistence of a chosen slot
"""

__version__ = "0.1.0"
