"""Tests for the sign-in, sign-up and password recovery forms."""

from __future__ import annotations

import httpx

from dashboard.auth_forms import (
    NETWORK_ERROR_MESSAGE,
    ForgotPasswordForm,
    ResetPasswordForm,
    SignInForm,
    SignUpForm,
)
from dashboard.local_store import TOKEN_KEY
from dashboard.session import Session

USER = {"id": 3, "email": "pat@example.com", "role": "participant"}


def _session(mock_api, cache, store, handler):
    api, transport = mock_api(handler)
    return Session(api, cache, store), transport


def _filled_signup(session, notifier, role="participant") -> SignUpForm:
    form = SignUpForm(session, notifier)
    form.first_name = "Pat"
    form.last_name = "Smith"
    form.email = "pat@example.com"
    form.password = form.confirm_password = "Secret123"
    form.role = role
    form.accept_terms = form.accept_privacy = True
    return form


def test_sign_up_local_checks_send_nothing(mock_api, cache, store, notifier):
    session, transport = _session(mock_api, cache, store, lambda r: httpx.Response(500))

    no_role = _filled_signup(session, notifier, role="")
    assert no_role.submit() is None
    assert notifier.last.title == "Role required"

    no_terms = _filled_signup(session, notifier)
    no_terms.accept_privacy = False
    assert no_terms.submit() is None
    assert notifier.last.title == "Agreement required"

    mismatch = _filled_signup(session, notifier)
    mismatch.confirm_password = "Other123"
    assert mismatch.submit() is None
    assert notifier.last.title == "Passwords don't match"

    assert transport.requests == []


def test_sign_up_success_redirects_participants_to_onboarding(mock_api, cache, store, notifier):
    session, _ = _session(
        mock_api,
        cache,
        store,
        lambda r: httpx.Response(201, json={"user": USER, "token": "tok"}),
    )
    form = _filled_signup(session, notifier)

    assert form.submit().token == "tok"

    assert store.get(TOKEN_KEY) == "tok"
    assert form.redirect_to == "/onboarding"
    assert notifier.last.title == "Account created!"


def test_invitation_only_rejection_opens_waitlist(mock_api, cache, store, notifier):
    session, _ = _session(
        mock_api,
        cache,
        store,
        lambda r: httpx.Response(
            403,
            json={
                "detail": "Client registration is currently by invitation only.",
                "invitationOnly": True,
            },
        ),
    )
    form = _filled_signup(session, notifier, role="client")

    assert form.submit() is None

    assert form.show_invitation is True
    assert notifier.history == []
    assert form.invitation_prefill() == {
        "first_name": "Pat",
        "last_name": "Smith",
        "email": "pat@example.com",
    }


def test_sign_in_error_and_success(mock_api, cache, store, notifier):
    responses = iter(
        [
            httpx.Response(401, json={"detail": "Invalid credentials"}),
            httpx.Response(200, json={"user": USER, "token": "tok"}),
        ]
    )
    session, _ = _session(mock_api, cache, store, lambda r: next(responses))
    form = SignInForm(session, notifier)
    form.email, form.password = "pat@example.com", "wrong"

    assert form.submit() is None
    assert notifier.last.description == "Invalid credentials"
    assert form.email == "pat@example.com"

    form.password = "Secret123"
    assert form.submit() is not None
    assert form.redirect_to == "/dashboard"


def test_forgot_password_messages(mock_api, cache, store, notifier):
    responses = iter(
        [
            httpx.Response(200, json={"message": "If an account exists, a link was sent."}),
        ]
    )
    session, transport = _session(mock_api, cache, store, lambda r: next(responses))
    form = ForgotPasswordForm(session, notifier)

    assert form.submit() is False
    assert form.message == "Please enter your email address"
    assert transport.requests == []

    form.email = "pat@example.com"
    assert form.submit() is True
    assert (form.message, form.message_type) == (
        "If an account exists, a link was sent.",
        "success",
    )
    assert form.email == ""


def test_forgot_password_network_error(mock_api, cache, store, notifier):
    def handler(request):
        raise httpx.ConnectError("offline", request=request)

    session, _ = _session(mock_api, cache, store, handler)
    form = ForgotPasswordForm(session, notifier)
    form.email = "pat@example.com"

    assert form.submit() is False
    assert form.message == NETWORK_ERROR_MESSAGE
    assert form.email == "pat@example.com"


def test_reset_password_without_token(mock_api, cache, store, notifier):
    session, transport = _session(mock_api, cache, store, lambda r: httpx.Response(200))
    form = ResetPasswordForm(session, notifier, token=None)

    assert form.open() is False
    assert form.message == "No reset token provided"
    assert transport.requests == []


def test_reset_password_validation_and_success(mock_api, cache, store, notifier):
    def handler(request: httpx.Request) -> httpx.Response:
        if request.method == "GET":
            return httpx.Response(200, json={"valid": True})
        return httpx.Response(200, json={"message": "Password reset successful"})

    session, transport = _session(mock_api, cache, store, handler)
    form = ResetPasswordForm(session, notifier, token="abc")
    assert form.open() is True

    form.new_password = "Secret123"
    assert form.submit() is False
    assert form.message == "Please fill in all fields"

    form.confirm_password = "Secret124"
    assert form.submit() is False
    assert form.message == "Passwords do not match"

    form.new_password = form.confirm_password = "short"
    assert form.submit() is False
    assert form.message == "Password must be at least 8 characters long"
    assert transport.count("POST", "/api/auth/reset-password") == 0

    form.new_password = form.confirm_password = "Secret123"
    assert form.submit() is True
    assert form.message == "Password reset successful"
    assert form.redirect_to == "/auth/signin"


def test_reset_password_invalid_token_blocks_submit(mock_api, cache, store, notifier):
    session, transport = _session(
        mock_api, cache, store, lambda r: httpx.Response(400, json={"valid": False})
    )
    form = ResetPasswordForm(session, notifier, token="expired")

    assert form.open() is False
    assert form.message == "Invalid or expired reset token"

    form.new_password = form.confirm_password = "Secret123"
    assert form.submit() is False
    assert transport.count("POST", "/api/auth/reset-password") == 0


def test_closed_sign_in_form_sends_nothing(mock_api, cache, store, notifier):
    session, transport = _session(
        mock_api, cache, store, lambda r: httpx.Response(200, json={"user": USER, "token": "t"})
    )
    form = SignInForm(session, notifier)
    form.email, form.password = "pat@example.com", "Secret123"
    form.close()

    assert form.submit() is None
    assert transport.requests == []
    assert store.get(TOKEN_KEY) is None
    assert form.redirect_to is None
