"""auth/ -- Authentication and authorization package for the food ordering service.

Layer rule: auth/ imports only stdlib + third-party libraries.
It does NOT import from api/, core/, or catalog/.
api/ imports from auth/, not the other way around.
"""
