"""Preference schemas."""

from core.schemas.preference.preference_detail import PreferenceDetail
from core.schemas.preference.preference_update import PreferenceUpdate
from core.schemas.preference.resolved_preference import ResolvedPreference

__all__ = ["PreferenceDetail", "PreferenceUpdate", "ResolvedPreference"]
