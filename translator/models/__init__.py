"""Database models for the translator application."""

from .user import User
from .translation_record import TranslationRecord

__all__ = ['User', 'TranslationRecord']
