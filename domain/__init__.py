"""
Nutrition domain: ORM models (ingredients, recipes, clients, plans, meals),
request/response schemas, ORM-to-schema mappers and shared enums.
"""

from domain import enums, mappers, models, schemas

__all__ = ["enums", "mappers", "models", "schemas"]
