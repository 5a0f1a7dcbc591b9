# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Authentication for private API requests.

Private shards and commands authenticate with a password, an autologin
token or a session PIN. The server hands back a fresh PIN (and, after a
password login, an autologin token) in the response headers; Auth can
record them so the next request reuses the session instead of logging
in again.
"""

import logging
from dataclasses import dataclass

from ..types.response import ResponseMetadata

logger = logging.getLogger(__name__)

PASSWORD_HEADER = "X-Password"
AUTOLOGIN_HEADER = "X-Autologin"
PIN_HEADER = "X-Pin"


@dataclass
class Auth:
    """
    Credentials for one nation.

    Attributes:
        password: Nation password
        autologin: Autologin token (an encrypted form of the password)
        pin: Session PIN returned by a previous request
        update_pin: Store the PIN returned by each successful request
        update_autologin: Store the autologin token returned by each
            successful request
    """

    password: str | None = None
    autologin: str | None = None
    pin: str | None = None
    update_pin: bool = True
    update_autologin: bool = True

    def headers(self) -> dict[str, str]:
        """Request headers for the credentials that are set."""
        headers: dict[str, str] = {}
        if self.password:
            headers[PASSWORD_HEADER] = self.password
        if self.autologin:
            headers[AUTOLOGIN_HEADER] = self.autologin
        if self.pin:
            headers[PIN_HEADER] = self.pin
        return headers

    def update_from(self, metadata: ResponseMetadata) -> None:
        """Copy session tokens from a successful response into this object."""
        if self.update_pin:
            pin = metadata.header(PIN_HEADER)
            if pin:
                self.pin = pin
                logger.debug("Updated session PIN from response headers")
        if self.update_autologin:
            autologin = metadata.header(AUTOLOGIN_HEADER)
            if autologin:
                self.autologin = autologin
                logger.debug("Updated autologin token from response headers")


__all__ = ["AUTOLOGIN_HEADER", "PASSWORD_HEADER", "PIN_HEADER", "Auth"]
