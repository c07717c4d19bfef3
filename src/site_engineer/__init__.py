"""Site Engineer Management backend.

Organized by feature modules (profiles, clients, sites, assignments,
check-ins, reports, leaves, ...) with a thin Flask controller layer over
service and repository layers.
"""

__version__ = "0.1.0"
