"""
Shared model building blocks.
"""

from schoolauth.modules.shared.models import BaseModel

__all__ = ["BaseModel"]
