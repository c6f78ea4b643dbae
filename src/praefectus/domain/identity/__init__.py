"""Praefectus Domain Identity -- administrator lifecycle and invitations."""

from praefectus.domain.identity.admin_lifecycle import AdminLifecycleManager, CreationMode
from praefectus.domain.identity.invitation import InvitationDispatcher, build_activation_link

__all__ = [
    "AdminLifecycleManager",
    "CreationMode",
    "InvitationDispatcher",
    "build_activation_link",
]
