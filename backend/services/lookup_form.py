"""
Lookup form controller.

Holds the state of the phone search form (value, searching flag, result,
error) and talks to POST /api/search over httpx. The static page in
static/index.html follows the same rules in the browser.
"""
import logging
from typing import Optional

import httpx

from models import InvitationRecord
from services.phone import normalize_phone_input, phone_input_error

logger = logging.getLogger(__name__)

SEARCH_PATH = "/api/search"
MSG_NOT_FOUND_FALLBACK = "no information found"
MSG_REQUEST_FAILED = "an error occurred while searching, please try again"

NAVIGATION_KEYS = {
    "Backspace", "Delete", "Tab", "Enter",
    "ArrowLeft", "ArrowRight", "ArrowUp", "ArrowDown",
    "Home", "End",
}
CLIPBOARD_SHORTCUTS = {"a", "c", "v", "x"}


class LookupForm:
    def __init__(self, client: httpx.AsyncClient):
        self.client = client
        self.phone_number: str = ""
        self.is_searching: bool = False
        self.result: Optional[InvitationRecord] = None
        self.error: Optional[str] = None

    def change(self, raw: str) -> None:
        """Typing or programmatic edit: keep digits only, at most 10."""
        self.phone_number = normalize_phone_input(raw)
        self.error = None
        self.result = None

    def paste(self, text: str) -> None:
        self.change(text)

    def key_down(self, key: str, ctrl: bool = False) -> bool:
        """
        Apply a single key to the field. Returns False when the key is blocked.
        Digits append, Backspace removes the last digit, other editing and
        navigation keys pass through untouched.
        """
        if ctrl and key.lower() in CLIPBOARD_SHORTCUTS:
            return True
        if key in NAVIGATION_KEYS:
            if key == "Backspace" and self.phone_number:
                self.change(self.phone_number[:-1])
            return True
        if len(key) == 1 and key.isdigit():
            self.change(self.phone_number + key)
            return True
        return False

    async def key_press(self, key: str) -> None:
        if key == "Enter":
            await self.submit()

    async def submit(self) -> None:
        error = phone_input_error(self.phone_number)
        if error:
            self.error = error
            return

        self.is_searching = True
        self.result = None
        self.error = None
        try:
            response = await self.client.post(SEARCH_PATH, json={"phoneNumber": self.phone_number})
            data = response.json()
            if not isinstance(data, dict):
                data = {}
            if response.is_error:
                self.error = data.get("error") or MSG_NOT_FOUND_FALLBACK
                return
            if data.get("success") and data.get("data"):
                self.result = InvitationRecord.model_validate(data["data"])
            else:
                self.error = MSG_NOT_FOUND_FALLBACK
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"Search request failed: {e}")
            self.error = MSG_REQUEST_FAILED
        finally:
            self.is_searching = False


def create_client(base_url: str) -> httpx.AsyncClient:
    """No retries and no timeout: a hung request only keeps is_searching set."""
    return httpx.AsyncClient(base_url=base_url, timeout=None)
