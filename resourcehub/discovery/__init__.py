"""
Resource discovery core.

Responsibilities:
- Narrow a resource snapshot by keyword, category and tag criteria.
- Rank resources related to a reference resource by tag overlap, falling back
  to popularity when the reference carries no tags.

Everything here is a pure function over immutable ``ResourceRecord`` values.
"""

from .errors import DiscoveryError, InvalidArgumentError, ResourceNotFoundError
from .models import CategoryRef, ResourceRecord, TagRef
from .recommend import recommend
from .search import filter_resources

__all__ = [
    "CategoryRef",
    "DiscoveryError",
    "InvalidArgumentError",
    "ResourceNotFoundError",
    "ResourceRecord",
    "TagRef",
    "filter_resources",
    "recommend",
]
