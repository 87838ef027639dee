"""API routes package"""

from . import health, clients, ingredients, recipes, plans, macros

__all__ = ["health", "clients", "ingredients", "recipes", "plans", "macros"]
