# This file marks the schemas package for API response and request models.
# Grouping contracts here helps keep request and response typing easy to navigate.
