"""Preference model learned from user feedback."""

from .preference_model import PreferenceModel, update_weights

__all__ = ['PreferenceModel', 'update_weights']
