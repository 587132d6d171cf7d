"""Dashboard components driven against the real Flask app."""

from __future__ import annotations

import httpx
import pytest

from dashboard.api import ApiClient
from dashboard.auth_forms import SignInForm, SignUpForm
from dashboard.forms import DocumentUploadForm, InvitationForm, MessageCenter
from dashboard.local_store import TOKEN_KEY, MemoryStore
from dashboard.menu_panel import MenuControlPanel
from dashboard.notifications import Notifier
from dashboard.query_cache import QueryCache
from dashboard.session import ME_KEY, Session


@pytest.fixture()
def open_session(app):
    """Start an independent browser-like session against the app."""

    clients = []

    def _open():
        store = MemoryStore()
        api = ApiClient("http://testserver", store, transport=httpx.WSGITransport(app=app))
        clients.append(api)
        return Session(api, QueryCache(), store), Notifier()

    yield _open
    for api in clients:
        api.close()


def _sign_in(open_session, email, password="Password123"):
    session, notifier = open_session()
    form = SignInForm(session, notifier)
    form.email, form.password = email, password
    assert form.submit() is not None
    return session, notifier


def test_participant_signs_up_and_uploads_a_document(live_session, notifier):
    form = SignUpForm(live_session, notifier)
    form.first_name, form.last_name = "Pat", "Participant"
    form.email = "pat@example.com"
    form.password = form.confirm_password = "Secret123"
    form.role = "participant"
    form.accept_terms = form.accept_privacy = True

    assert form.submit() is not None
    assert live_session.current_user()["email"] == "pat@example.com"

    upload = DocumentUploadForm(
        live_session.api, live_session.cache, notifier, role=live_session.role
    )
    document = upload.upload("passport.pdf", b"%PDF-1.4", "application/pdf")

    assert document["status"] == "pending"
    status = upload.load_status()
    assert status["verificationStatus"] == "pending"
    assert [doc["id"] for doc in upload.uploaded_docs] == [document["id"]]


def test_admin_edits_menu_and_reviewers_see_it(open_session, make_user):
    make_user("admin@example.com", role="admin")
    session, notifier = _sign_in(open_session, "admin@example.com")

    panel = MenuControlPanel(session.api, session.cache, notifier)
    panel.load()
    panel.set_enabled("pricing", False)
    panel.set_title("cta", "Join Now")
    assert panel.save() is True

    fresh = MenuControlPanel(session.api, session.cache, Notifier())
    fresh.load()
    assert fresh.status_text("pricing") == "Disabled"
    assert fresh.draft["pricing"].visible is True
    assert "Join Now" in fresh.preview()
    assert "Pricing" not in fresh.preview()


def test_manager_messages_participant(open_session, make_user):
    make_user("manager@example.com", role="manager")
    participant_id = make_user("pat@example.com", role="participant")

    manager_session, manager_notifier = _sign_in(open_session, "manager@example.com")
    outbox = MessageCenter(
        manager_session.api, manager_session.cache, manager_notifier, manager_session
    )
    outbox.load()
    assert [p["id"] for p in outbox.participants] == [participant_id]

    outbox.compose.update(recipient_id=participant_id, subject="Welcome", content="Hi Pat")
    assert outbox.send() is True

    participant_session, notifier = _sign_in(open_session, "pat@example.com")
    inbox = MessageCenter(
        participant_session.api, participant_session.cache, notifier, participant_session
    )
    inbox.load()
    assert [m["subject"] for m in inbox.messages] == ["Welcome"]
    assert inbox.participants == []

    assert inbox.mark_read(inbox.messages[0]["id"]) is True
    inbox.refresh()
    assert inbox.unread_count == 0


def test_invitation_only_signup_falls_back_to_waitlist(open_session, make_user):
    make_user("admin@example.com", role="admin")
    admin_session, _ = _sign_in(open_session, "admin@example.com")
    admin_session.api.put("/api/admin/invitation/settings", json={"invitationOnly": True})

    session, notifier = open_session()
    signup = SignUpForm(session, notifier)
    signup.first_name, signup.last_name = "Cleo", "Client"
    signup.email = "cleo@example.com"
    signup.password = signup.confirm_password = "Secret123"
    signup.role = "client"
    signup.accept_terms = signup.accept_privacy = True

    assert signup.submit() is None
    assert signup.show_invitation is True

    invitation = InvitationForm(session.api, notifier, prefill=signup.invitation_prefill())
    invitation.set_field("company", "Cleo Co")
    assert invitation.submit() is True

    waitlist = admin_session.api.get("/api/admin/invitation/waitlist")
    assert [entry["email"] for entry in waitlist] == ["cleo@example.com"]


def test_banned_user_session_is_torn_down(open_session, make_user):
    make_user("manager@example.com", role="manager")
    participant_id = make_user("pat@example.com", role="participant")
    participant_session, _ = _sign_in(open_session, "pat@example.com")
    manager_session, _ = _sign_in(open_session, "manager@example.com")

    manager_session.api.post(
        f"/api/manager/participants/{participant_id}/ban", json={"reason": "spam"}
    )
    participant_session.cache.invalidate(ME_KEY)

    assert participant_session.current_user() is None
    assert participant_session.store.get(TOKEN_KEY) is None
