"""
Domain models — Pydantic types for devsetup.

All models are re-exported here for convenient access:

    from devsetup.core.models import Profile, HostInfo, Receipt, Settings
"""

from devsetup.core.models.action import CommandResult, Receipt
from devsetup.core.models.profile import HostInfo, Profile
from devsetup.core.models.settings import AppsSettings, Settings, ZshSettings

__all__ = [
    # action.py
    "CommandResult",
    "Receipt",
    # profile.py
    "HostInfo",
    "Profile",
    # settings.py
    "AppsSettings",
    "Settings",
    "ZshSettings",
]
