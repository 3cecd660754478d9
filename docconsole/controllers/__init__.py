"""
Controllers translating user interaction into console API calls and view updates.
"""

from docconsole.controllers.search import SearchController
from docconsole.controllers.release_sync_modal import ReleaseSyncModal
from docconsole.controllers.library_forms import LibraryFormController

__all__ = ["SearchController", "ReleaseSyncModal", "LibraryFormController"]
