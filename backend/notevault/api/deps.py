"""Process-wide stores and services shared by the routers.

Built at import time from ``notevault.config``. Tests point ``APP_DATA_DIR``
at a temp dir and reload ``notevault.config`` then this module.
"""

from notevault import config
from notevault.core.access import NoteAccessGuard
from notevault.core.collaboration import CollaborationRegistry, SharingService
from notevault.core.locking import LockStateMachine
from notevault.core.notes import NoteService
from notevault.storage.collaborators_store import CollaboratorsStore
from notevault.storage.event_log import EventLog
from notevault.storage.folders_store import FoldersStore
from notevault.storage.notes_store import NotesStore
from notevault.storage.users_store import UsersStore

DATA_DIR = config.DATA_DIR

notes_store = NotesStore(DATA_DIR)
collaborators_store = CollaboratorsStore(DATA_DIR)
folders = FoldersStore(DATA_DIR)
users = UsersStore(DATA_DIR)
event_log = EventLog(DATA_DIR)

guard = NoteAccessGuard(notes_store, collaborators_store)
registry = CollaborationRegistry(collaborators_store, notes_store, users)
locks = LockStateMachine(notes_store, guard)
sharing = SharingService(guard, registry, notes_store, users)
notes = NoteService(notes_store, folders, registry, guard)
