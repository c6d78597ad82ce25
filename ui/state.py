"""Workspace view-state transitions.

Works on any mutable mapping so the same handlers drive ``st.session_state``
in the app and a plain dict in tests. ``notify(title, description, error)``
is how handlers surface toasts.
"""

from __future__ import annotations

import logging
from typing import Callable, MutableMapping, Optional

from migrator.core.prompt import target_option
from migrator.core.sessions import SessionHistory
from ui.client import MigrationClient, MigrationFailed


logger = logging.getLogger(__name__)

Notify = Callable[[str, str, bool], None]


SAMPLE_LEGACY_CODE = """// Legacy JavaScript code
var UserManager = function() {
  this.users = [];
};

UserManager.prototype.addUser = function(name, email) {
  var self = this;
  var user = {
    id: Date.now(),
    name: name,
    email: email,
    createdAt: new Date()
  };
  self.users.push(user);
  return user;
};

UserManager.prototype.findUser = function(id) {
  for (var i = 0; i < this.users.length; i++) {
    if (this.users[i].id === id) {
      return this.users[i];
    }
  }
  return null;
};

UserManager.prototype.removeUser = function(id) {
  var self = this;
  this.users = this.users.filter(function(user) {
    return user.id !== id;
  });
};

// Usage
var manager = new UserManager();
manager.addUser('John', 'john@example.com');
console.log(manager.findUser(1));"""


def init_state(state: MutableMapping, history_limit: Optional[int] = None) -> None:
    state.setdefault("source_code", SAMPLE_LEGACY_CODE)
    state.setdefault("migrated_code", "")
    state.setdefault("target_format", "es6")
    state.setdefault("show_diff", False)
    state.setdefault("is_loading", False)
    if "history" not in state:
        state["history"] = SessionHistory(limit=history_limit)


def handle_migrate(state: MutableMapping, client: MigrationClient, notify: Notify) -> bool:
    source = state.get("source_code") or ""
    if not source.strip():
        notify("No code to migrate", "Please paste some legacy JavaScript code first.", True)
        return False

    target = state["target_format"]
    state["is_loading"] = True
    try:
        migrated = client.migrate(source, target)
    except MigrationFailed as exc:
        logger.error("Migration error: %s", exc)
        notify("Migration failed", str(exc) or "Failed to migrate code. Please try again.", True)
        return False
    finally:
        state["is_loading"] = False

    state["migrated_code"] = migrated
    state["show_diff"] = True
    state["history"].add(source, migrated, target)
    notify(
        "Migration complete!",
        f"Your code has been converted to {target_option(target)['title']}.",
        False,
    )
    return True


def handle_reset(state: MutableMapping) -> None:
    state["source_code"] = ""
    state["migrated_code"] = ""
    state["show_diff"] = False
    state["history"].clear_selection()


def handle_select(state: MutableMapping, session_id: str) -> None:
    session = state["history"].select(session_id)
    state["source_code"] = session.original_code
    state["migrated_code"] = session.migrated_code
    state["target_format"] = session.target_format
    state["show_diff"] = True


def handle_delete(state: MutableMapping, session_id: str, notify: Notify) -> None:
    if state["history"].delete(session_id):
        notify("Session deleted", "The migration session has been removed.", False)


def handle_clear_history(state: MutableMapping, notify: Notify) -> None:
    state["history"].clear()
    notify("History cleared", "All migration sessions have been removed.", False)
