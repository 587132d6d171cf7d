"""Sign-in, sign-up and password recovery forms."""

from __future__ import annotations

import logging
from typing import Optional

from utils.permissions import SELF_SERVICE_ROLES

from .api import ApiError, NetworkError
from .component import Component
from .notifications import Notifier
from .session import AuthResponse, Session, SignInData, SignUpData

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8
NETWORK_ERROR_MESSAGE = "Network error. Please check your connection and try again."


class _SessionForm(Component):
    def __init__(self, session: Session, notifier: Notifier):
        super().__init__(session.api, notifier)
        self.session = session
        self.redirect_to: Optional[str] = None


class SignInForm(_SessionForm):
    def __init__(self, session: Session, notifier: Notifier):
        super().__init__(session, notifier)
        self.email = ""
        self.password = ""

    def submit(self) -> Optional[AuthResponse]:
        if self.closed or self.session.is_signing_in:
            return None
        if not self.email.strip() or not self.password:
            self.notifier.error("Missing Information", "Please enter your email and password")
            return None
        try:
            response = self.session.sign_in(SignInData(self.email.strip(), self.password))
        except ApiError as exc:
            if not self._discard_if_closed("sign_in"):
                self.notifier.error("Sign in failed", exc.message)
            return None

        if not self._discard_if_closed("sign_in"):
            self.notifier.toast("Welcome back!", "You have successfully signed in.")
            self.redirect_to = "/dashboard"
        return response


class SignUpForm(_SessionForm):
    """Account creation; an invitation-only refusal opens the waitlist dialog."""

    def __init__(self, session: Session, notifier: Notifier):
        super().__init__(session, notifier)
        self.first_name = ""
        self.last_name = ""
        self.email = ""
        self.password = ""
        self.confirm_password = ""
        self.role = ""
        self.accept_terms = False
        self.accept_privacy = False
        self.show_invitation = False

    def invitation_prefill(self) -> dict:
        return {
            "first_name": self.first_name,
            "last_name": self.last_name,
            "email": self.email,
        }

    def _validate(self) -> bool:
        if self.role not in SELF_SERVICE_ROLES:
            self.notifier.error("Role required", "Please choose whether you are a client or a participant")
            return False
        if not (self.accept_terms and self.accept_privacy):
            self.notifier.error(
                "Agreement required",
                "Please accept the Terms of Service and Privacy Policy to continue",
            )
            return False
        if self.password != self.confirm_password:
            self.notifier.error("Passwords don't match", "Please make sure your passwords match")
            return False
        return True

    def submit(self) -> Optional[AuthResponse]:
        if self.closed or self.session.is_signing_up or not self._validate():
            return None

        data = SignUpData(
            email=self.email.strip(),
            password=self.password,
            confirm_password=self.confirm_password,
            first_name=self.first_name.strip(),
            last_name=self.last_name.strip(),
            role=self.role,
        )
        try:
            response = self.session.sign_up(data)
        except ApiError as exc:
            if self._discard_if_closed("sign_up"):
                return None
            if exc.payload.get("invitationOnly"):
                self.show_invitation = True
            else:
                self.notifier.error("Sign up failed", exc.message)
            return None

        if not self._discard_if_closed("sign_up"):
            self.notifier.toast("Account created!", "Welcome to FokusHub360.")
            self.redirect_to = "/onboarding" if self.role == "participant" else "/dashboard"
        return response


class ForgotPasswordForm(_SessionForm):
    """Requests a reset link; the outcome is shown inline, not as a toast."""

    def __init__(self, session: Session, notifier: Notifier):
        super().__init__(session, notifier)
        self.email = ""
        self.loading = False
        self.message = ""
        self.message_type = ""

    def _show(self, message: str, message_type: str) -> None:
        self.message = message
        self.message_type = message_type

    def submit(self) -> bool:
        if self.closed or self.loading:
            return False
        if not self.email.strip():
            self._show("Please enter your email address", "error")
            return False

        self.loading = True
        self._show("", "")
        try:
            message = self.session.forgot_password(self.email.strip())
        except NetworkError:
            self._show(NETWORK_ERROR_MESSAGE, "error")
            return False
        except ApiError as exc:
            self._show(exc.message or "Failed to send reset email", "error")
            return False
        finally:
            self.loading = False

        if self._discard_if_closed("forgot_password"):
            return True
        self._show(message, "success")
        self.email = ""
        return True


class ResetPasswordForm(_SessionForm):
    """Sets a new password from an emailed token."""

    def __init__(self, session: Session, notifier: Notifier, token: Optional[str]):
        super().__init__(session, notifier)
        self.token = token or ""
        self.token_valid: Optional[bool] = None
        self.new_password = ""
        self.confirm_password = ""
        self.loading = False
        self.message = ""
        self.message_type = ""

    def _show(self, message: str, message_type: str) -> None:
        self.message = message
        self.message_type = message_type

    def open(self) -> bool:
        """Check the token before showing the form."""

        if not self.token:
            self.token_valid = False
            self._show("No reset token provided", "error")
            return False
        try:
            valid = self.session.verify_reset_token(self.token)
        except NetworkError:
            self.token_valid = False
            self._show(NETWORK_ERROR_MESSAGE, "error")
            return False
        except ApiError as exc:
            logger.warning("Reset token check failed: %s", exc)
            valid = False

        self.token_valid = valid
        if not valid:
            self._show("Invalid or expired reset token", "error")
        return valid

    def _validate(self) -> bool:
        if not self.new_password or not self.confirm_password:
            self._show("Please fill in all fields", "error")
            return False
        if self.new_password != self.confirm_password:
            self._show("Passwords do not match", "error")
            return False
        if len(self.new_password) < MIN_PASSWORD_LENGTH:
            self._show("Password must be at least 8 characters long", "error")
            return False
        return True

    def submit(self) -> bool:
        if self.closed or self.loading or not self.token_valid or not self._validate():
            return False

        self.loading = True
        self._show("", "")
        try:
            message = self.session.reset_password(self.token, self.new_password)
        except NetworkError:
            self._show(NETWORK_ERROR_MESSAGE, "error")
            return False
        except ApiError as exc:
            self._show(exc.message or "Failed to reset password", "error")
            return False
        finally:
            self.loading = False

        if self._discard_if_closed("reset_password"):
            return True
        self._show(message, "success")
        self.new_password = ""
        self.confirm_password = ""
        self.redirect_to = "/auth/signin"
        return True
