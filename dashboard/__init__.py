"""Python client for the FokusHub360 dashboard.

Components hold UI state and talk to the API through a shared
``ApiClient``; none of them render anything themselves.
"""

from .api import ApiClient, ApiError, NetworkError, is_unauthorized_error
from .auth_forms import ForgotPasswordForm, ResetPasswordForm, SignInForm, SignUpForm
from .consent import CookieConsent, CookieSettings
from .forms import ContactForm, DocumentUploadForm, InvitationForm, MessageCenter
from .local_store import JsonFileStore, LocalStore, MemoryStore
from .menu_panel import MenuControlPanel, MenuSection
from .notifications import Notification, Notifier
from .query_cache import QueryCache
from .session import AuthResponse, Session, SignInData, SignUpData

__all__ = [
    "ApiClient",
    "ApiError",
    "AuthResponse",
    "ContactForm",
    "CookieConsent",
    "CookieSettings",
    "DocumentUploadForm",
    "ForgotPasswordForm",
    "InvitationForm",
    "JsonFileStore",
    "LocalStore",
    "MemoryStore",
    "MenuControlPanel",
    "MenuSection",
    "MessageCenter",
    "NetworkError",
    "Notification",
    "Notifier",
    "QueryCache",
    "ResetPasswordForm",
    "Session",
    "SignInData",
    "SignUpData",
    "SignUpForm",
    "is_unauthorized_error",
]
