# This file marks the API package for the Scenario Sage HTTP service.
# It groups the app factory, configuration, routers, and schemas under one namespace.
