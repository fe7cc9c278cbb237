"""SQLModel database models for itemshare."""

from itemshare.models.items import Item, ItemBase
from itemshare.models.profiles import Profile, ProfileBase
from itemshare.models.shares import SharedItem, SharedItemBase

__all__ = [
    "Item",
    "ItemBase",
    "Profile",
    "ProfileBase",
    "SharedItem",
    "SharedItemBase",
]
