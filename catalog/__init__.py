"""catalog/ -- Product catalog persistence for the food ordering service.

Layer rule: catalog/ imports only stdlib + third-party libraries.
api/ imports from catalog/, not the other way around.
"""
