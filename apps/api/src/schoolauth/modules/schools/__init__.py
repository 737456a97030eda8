"""
Schools module - School account storage.
"""

from schoolauth.modules.schools.models import School, SchoolRole
from schoolauth.modules.schools.repository import SchoolProjection

__all__ = ["School", "SchoolRole", "SchoolProjection"]
