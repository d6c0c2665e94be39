"""
SQLAlchemy ORM models package.

All models are imported here so that:
  1. Base.metadata knows every table before create_all() runs
  2. Other modules can import from cardfolio.models directly
"""

from cardfolio.models.user import User, UserRole  # noqa: F401
from cardfolio.models.business_card import BusinessCard, CardTemplate, PRESENTABLE_FIELDS  # noqa: F401
from cardfolio.models.public_link import PublicLink  # noqa: F401
