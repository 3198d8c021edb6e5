"""Module: access_code.

Clinicians may only write a diagnosis after the clinic owner has been sent a
one-off code and the clinician submits it back. The code lives in the caller's
HTTP session, one slot per session.
"""

import logging
import secrets
from typing import Callable, MutableMapping

from vetclinic.core.config import Settings
from vetclinic.core.errors import Forbidden, ServerError
from vetclinic.services.mailer import EmailDeliveryError

logger = logging.getLogger(__name__)

SESSION_KEY = "diagnosisAccessCode"
ACCESS_CODE_SUBJECT = "Diagnosis Access Code Request"

Sender = Callable[[str, str, str], None]


class AccessCodeSession:
    """Single outstanding access code held in a per-caller session mapping."""

    def __init__(self, session: MutableMapping | None):
        self._session = session

    @property
    def attached(self) -> bool:
        return self._session is not None

    @property
    def code(self) -> str | None:
        if self._session is None:
            return None
        return self._session.get(SESSION_KEY)

    def store(self, code: str) -> None:
        if self._session is None:
            raise ServerError("Session is not initialized.")
        self._session[SESSION_KEY] = code


def generate_access_code() -> str:
    """4 random bytes as 8 uppercase hex characters."""
    return secrets.token_hex(4).upper()


def issue_access_code(
    access_session: AccessCodeSession,
    settings: Settings,
    send: Sender,
) -> str:
    """
    Email a fresh code to the clinic owner and remember it for this session.

    The session is only written after the email was accepted, so a failed
    delivery leaves any previously issued code in place.
    """
    if not access_session.attached:
        raise ServerError("Session is not initialized.")

    recipient = settings.clinic_owner_email
    if not recipient:
        raise ServerError("Clinic owner email is not set.")

    code = generate_access_code()
    body = (
        "A clinician has requested access to edit a diagnosis.\n\n"
        f"Access code: {code}\n\n"
        "Share this code with the clinician only if you approve the change."
    )

    try:
        send(recipient, ACCESS_CODE_SUBJECT, body)
    except EmailDeliveryError as e:
        logger.error("Access code email could not be delivered: %s", e)
        raise ServerError("Server error while requesting access code.", original_error=e) from e

    access_session.store(code)
    logger.info("Diagnosis access code issued")
    return code


def verify_access_code(access_session: AccessCodeSession, supplied: str | None) -> None:
    expected = access_session.code
    if not expected:
        raise Forbidden("Access code not requested or expired.")
    if supplied is None or not secrets.compare_digest(str(supplied).encode(), expected.encode()):
        raise Forbidden("Invalid access code.")
