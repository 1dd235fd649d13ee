# This file marks the routers package for API route modules.
# Endpoint modules are grouped by domain: health, time-series core, and scenario workflows.
