"""Services (cleanup engine) for mac-cleanup."""

from . import approval
from . import cleaner_service
from . import external_service
from . import finder_service
from . import orchestrator

__all__ = ["approval", "cleaner_service", "external_service", "finder_service", "orchestrator"]
