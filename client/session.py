"""
Client-side session: the logged-in user and their token.

A Session is created explicitly and handed to whatever calls the API
(see `client.api.ApiClient`). Its lifecycle is:

    session = Session(path)
    session.hydrate()          # restore from disk, if anything is stored
    session.login(user, token) # after a successful /login
    session.logout()           # clears memory and the stored file
"""

import json
import logging
import os
from typing import Optional, Dict, Any


class Session:
    def __init__(self, storage_path: str):
        self.storage_path = storage_path
        self.token: Optional[str] = None
        self.user: Optional[Dict[str, Any]] = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    @property
    def email(self) -> Optional[str]:
        return self.user.get("email") if self.user else None

    def hydrate(self) -> None:
        """
        Restore token and user from the storage file.

        A missing file leaves the session empty. A user entry that is not a
        JSON object is dropped (and removed from storage) while the token is
        kept.
        """
        if not os.path.exists(self.storage_path):
            return

        try:
            with open(self.storage_path, "r", encoding="utf-8") as f:
                stored = json.load(f)
        except (OSError, ValueError) as e:
            logging.warning(f"Invalid session data in {self.storage_path}: {e}")
            self._remove_storage()
            return

        if not isinstance(stored, dict):
            logging.warning(f"Invalid session data in {self.storage_path}: not an object")
            self._remove_storage()
            return

        self.token = stored.get("token") or None

        user = stored.get("user")
        if isinstance(user, dict):
            self.user = user
        elif user is not None:
            logging.warning("Invalid user data in session storage, discarding it")
            self._persist()

    def login(self, user: Optional[Dict[str, Any]], token: Optional[str]) -> None:
        if not user or not token:
            logging.warning("login() called with invalid user or token")
            return

        self.user = user
        self.token = token
        self._persist()

    def logout(self) -> None:
        self.user = None
        self.token = None
        self._remove_storage()

    def _persist(self) -> None:
        try:
            with open(self.storage_path, "w", encoding="utf-8") as f:
                json.dump({"token": self.token, "user": self.user}, f)
        except OSError as e:
            logging.error(f"Failed to store session in {self.storage_path}: {e}")

    def _remove_storage(self) -> None:
        try:
            os.remove(self.storage_path)
        except FileNotFoundError:
            pass
