import threading
from typing import List, Optional

from .models import Account

class AccountStore:
    """In-memory accounts plus the one currently selected for launching."""

    def __init__(self):
        self._lock = threading.Lock()
        self._accounts: List[Account] = []
        self._active: Optional[Account] = None

    def all(self) -> List[Account]:
        with self._lock:
            return list(self._accounts)

    def add(self, account: Account) -> None:
        with self._lock:
            self._accounts.append(account)

    def remove(self, account: Account) -> None:
        with self._lock:
            self._accounts = [a for a in self._accounts if a != account]
            if self._active == account:
                self._active = None

    def get_active(self) -> Optional[Account]:
        with self._lock:
            return self._active

    def set_active(self, account: Optional[Account]) -> None:
        with self._lock:
            self._active = account
