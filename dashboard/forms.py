"""Form and dialog components that submit to the API.

All forms follow the same contract: required fields are checked before any
request, a submission is a single POST, errors are shown verbatim in a
destructive notification and the entered values stay in place for a retry.
"""

from __future__ import annotations

import logging
import mimetypes
import os
from pathlib import Path
from typing import Any, Optional

from utils.permissions import can_review_verification, can_send_messages

from .api import ApiClient, ApiError
from .component import Component
from .notifications import Notifier
from .query_cache import QueryCache
from .session import Session

logger = logging.getLogger(__name__)

MAX_FILE_SIZE = 10 * 1024 * 1024
ALLOWED_MIME_TYPES = frozenset({"image/jpeg", "image/png", "image/jpg", "application/pdf"})
DOCUMENT_TYPES = ("identity", "address", "income", "other")
REQUIRED_VERIFIED_DOCUMENTS = 2

MESSAGES_KEY = "/api/messages"
PARTICIPANTS_KEY = "/api/manager/participants"
VERIFICATION_STATUS_KEY = "/api/verification/status"


class FormComponent(Component):
    """A component with named text fields and a set of required ones."""

    fields_spec: dict[str, str] = {}
    required: tuple[str, ...] = ()

    def __init__(self, api: ApiClient, notifier: Notifier):
        super().__init__(api, notifier)
        self.fields: dict[str, str] = {name: "" for name in self.fields_spec}
        self.submitting = False
        self.submitted = False

    def set_field(self, name: str, value: str) -> None:
        if name not in self.fields:
            raise KeyError(f"Unknown field: {name}")
        self.fields[name] = value

    def update(self, **values: str) -> None:
        for name, value in values.items():
            self.set_field(name, value)

    def missing_fields(self) -> list[str]:
        return [name for name in self.required if not self.fields[name].strip()]

    def _required_message(self) -> str:
        labels = ", ".join(self.fields_spec[name] for name in self.required)
        return f"Please fill in all required fields ({labels})."

    def reset(self) -> None:
        self.fields = {name: "" for name in self.fields_spec}
        self.submitted = False

    def _post(self, path: str, payload: dict, error_title: str, fallback: str) -> Optional[Any]:
        """POST once; on failure notify and return None, leaving fields intact."""

        if self.submitting or self.closed:
            return None
        self.submitting = True
        try:
            result = self.api.post(path, json=payload)
        except ApiError as exc:
            if not self._discard_if_closed(path):
                self.notifier.error(error_title, exc.message or fallback)
            return None
        finally:
            self.submitting = False
        return result


class InvitationForm(FormComponent):
    """Waitlist application dialog."""

    fields_spec = {
        "first_name": "First Name",
        "last_name": "Last Name",
        "email": "Email",
        "phone": "Phone",
        "company": "Company",
        "message": "Message",
    }
    required = ("first_name", "last_name", "email", "company")

    def __init__(self, api: ApiClient, notifier: Notifier, prefill: Optional[dict] = None):
        super().__init__(api, notifier)
        if prefill:
            self.open(prefill)

    def open(self, prefill: Optional[dict] = None) -> None:
        """Show the dialog, copying name and email from a failed sign-up."""

        for name in ("first_name", "last_name", "email"):
            if prefill and prefill.get(name):
                self.fields[name] = prefill[name]

    def submit(self) -> bool:
        if self.submitted or self.submitting:
            return False
        if self.missing_fields():
            self.notifier.error("Required Fields", self._required_message())
            return False

        payload = {
            "firstName": self.fields["first_name"].strip(),
            "lastName": self.fields["last_name"].strip(),
            "email": self.fields["email"].strip(),
            "phone": self.fields["phone"].strip() or None,
            "company": self.fields["company"].strip(),
            "message": self.fields["message"].strip() or None,
            "status": "pending",
        }
        result = self._post(
            "/api/invitation/waitlist",
            payload,
            "Error",
            "Failed to submit application. Please try again.",
        )
        if result is None or self._discard_if_closed("waitlist"):
            return False

        self.submitted = True
        self.notifier.toast(
            "Application Submitted!",
            "Thank you for your interest. We'll review your application "
            "and get back to you soon.",
        )
        return True


class ContactForm(FormComponent):
    fields_spec = {
        "name": "Name",
        "email": "Email",
        "subject": "Subject",
        "category": "Category",
        "message": "Message",
    }
    required = ("name", "email", "subject", "message")

    def submit(self) -> bool:
        if self.submitted or self.submitting:
            return False
        if self.missing_fields():
            self.notifier.error("Required Fields", self._required_message())
            return False

        payload = {name: value.strip() for name, value in self.fields.items()}
        payload["category"] = payload["category"] or None
        result = self._post(
            "/api/contact", payload, "Error", "Failed to send message. Please try again."
        )
        if result is None or self._discard_if_closed("contact"):
            return False

        self.submitted = True
        self.notifier.toast(
            "Message Sent!",
            "Thank you for contacting us. We'll get back to you within 24 hours.",
        )
        return True


class MessageCenter(Component):
    """Inbox plus, for staff, a compose form addressed to participants."""

    def __init__(
        self, api: ApiClient, cache: QueryCache, notifier: Notifier, session: Session
    ):
        super().__init__(api, notifier)
        self.cache = cache
        self.session = session
        self.messages: list[dict] = []
        self.participants: list[dict] = []
        self.show_compose = False
        self.sending = False
        self.compose = self._blank_compose()

    @staticmethod
    def _blank_compose() -> dict[str, Any]:
        return {
            "recipient_id": "",
            "subject": "",
            "content": "",
            "message_type": "general",
            "priority": "normal",
        }

    @property
    def can_compose(self) -> bool:
        return can_send_messages(self.session.role)

    @property
    def unread_count(self) -> int:
        return sum(1 for message in self.messages if not message.get("isRead"))

    def load(self) -> None:
        try:
            self.messages = list(
                self.cache.fetch(MESSAGES_KEY, lambda: self.api.get(MESSAGES_KEY)) or []
            )
        except ApiError as exc:
            logger.error("Error fetching messages: %s", exc)

        if self.can_compose:
            try:
                self.participants = list(
                    self.cache.fetch(
                        PARTICIPANTS_KEY, lambda: self.api.get(PARTICIPANTS_KEY)
                    )
                    or []
                )
            except ApiError as exc:
                logger.error("Error fetching participants: %s", exc)

    def refresh(self) -> None:
        self.cache.invalidate(MESSAGES_KEY)
        self.load()

    def send(self) -> bool:
        if self.sending or self.closed:
            return False
        compose = self.compose
        if not (
            str(compose["recipient_id"]).strip()
            and compose["subject"].strip()
            and compose["content"].strip()
        ):
            self.notifier.error("Missing Information", "Please fill in all required fields")
            return False
        try:
            recipient_id = int(compose["recipient_id"])
        except (TypeError, ValueError):
            self.notifier.error("Missing Information", "Please choose a valid recipient")
            return False

        self.sending = True
        try:
            self.api.post(
                "/api/messages/send",
                json={
                    "recipientId": recipient_id,
                    "subject": compose["subject"].strip(),
                    "content": compose["content"].strip(),
                    "messageType": compose["message_type"],
                    "priority": compose["priority"],
                },
            )
        except ApiError as exc:
            if not self._discard_if_closed("send"):
                self.notifier.error(
                    "Send Failed", exc.message or "Failed to send message. Please try again."
                )
            return False
        finally:
            self.sending = False

        if self._discard_if_closed("send"):
            return True
        self.notifier.toast("Message Sent", "Your message has been sent successfully")
        self.compose = self._blank_compose()
        self.show_compose = False
        self.refresh()
        return True

    def mark_read(self, message_id: int) -> bool:
        if self.closed:
            return False
        try:
            self.api.post(f"/api/messages/{message_id}/read")
        except ApiError as exc:
            logger.error("Error marking message %s as read: %s", message_id, exc)
            return False
        if self._discard_if_closed("mark_read"):
            return True
        self.messages = [
            {**message, "isRead": True} if message.get("id") == message_id else message
            for message in self.messages
        ]
        self.cache.set(MESSAGES_KEY, list(self.messages))
        return True


class DocumentUploadForm(Component):
    """Identity document upload with local size and type checks."""

    def __init__(
        self,
        api: ApiClient,
        cache: QueryCache,
        notifier: Notifier,
        role: Optional[str],
        current_status: str = "not_submitted",
    ):
        super().__init__(api, notifier)
        self.cache = cache
        self.role = role
        self.current_status = current_status
        self.selected_type = "identity"
        self.uploaded_docs: list[dict] = []
        self.uploading = False

    @property
    def can_see_verification_status(self) -> bool:
        return can_review_verification(self.role)

    def status_badge(self) -> Optional[str]:
        """Status label for staff; other roles only get the upload controls."""

        if not self.can_see_verification_status:
            return None
        return self.current_status.replace("_", " ")

    def select_type(self, doc_type: str) -> None:
        if doc_type not in DOCUMENT_TYPES:
            raise ValueError(f"Unknown document type: {doc_type}")
        self.selected_type = doc_type

    def progress(self) -> float:
        verified = sum(1 for doc in self.uploaded_docs if doc.get("status") == "verified")
        return min(verified / REQUIRED_VERIFIED_DOCUMENTS * 100, 100.0)

    def load_status(self) -> Optional[dict]:
        try:
            status = self.cache.fetch(
                VERIFICATION_STATUS_KEY, lambda: self.api.get(VERIFICATION_STATUS_KEY)
            )
        except ApiError as exc:
            logger.error("Error fetching verification status: %s", exc)
            return None
        if status and not self.closed:
            self.current_status = status.get("verificationStatus", self.current_status)
            self.uploaded_docs = list(status.get("documents") or [])
        return status

    def _check_file(self, size: int, content_type: str) -> bool:
        if size > MAX_FILE_SIZE:
            self.notifier.error("File too large", "Please select a file smaller than 10MB")
            return False
        if content_type not in ALLOWED_MIME_TYPES:
            self.notifier.error("Invalid file type", "Please upload a JPEG, PNG, or PDF file")
            return False
        return True

    def upload(self, filename: str, content: bytes, content_type: str) -> Optional[dict]:
        """Validate locally, then send the file; returns the stored document."""

        if self.uploading or self.closed:
            return None
        if not self._check_file(len(content), content_type):
            return None

        self.uploading = True
        try:
            document = self.api.post(
                "/api/verification/upload",
                data={"type": self.selected_type},
                files={"document": (filename, content, content_type)},
            )
        except ApiError as exc:
            if not self._discard_if_closed("upload"):
                self.notifier.error("Upload failed", exc.message)
            return None
        finally:
            self.uploading = False

        self.cache.invalidate(VERIFICATION_STATUS_KEY)
        if self._discard_if_closed("upload"):
            return document
        self.uploaded_docs.append(document)
        self.notifier.toast(
            "Document uploaded successfully", "Your document is being reviewed."
        )
        return document

    def upload_path(self, path: str | os.PathLike, content_type: Optional[str] = None) -> Optional[dict]:
        """Upload a file from disk, checking its size before reading it."""

        path = Path(path)
        content_type = content_type or mimetypes.guess_type(path.name)[0] or ""
        if not self._check_file(path.stat().st_size, content_type):
            return None
        return self.upload(path.name, path.read_bytes(), content_type)
