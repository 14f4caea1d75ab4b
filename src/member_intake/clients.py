from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Protocol, cast

import httplib2
from google.auth.transport.requests import Request
from google.oauth2 import credentials as oauth_credentials
from google.oauth2 import service_account
from googleapiclient.discovery import build

from member_intake.config import AppConfig
from member_intake.retry import RetryConfig


class SheetsService(Protocol):
    def spreadsheets(self) -> Any: ...


SHEETS_SCOPE = "https://www.googleapis.com/auth/spreadsheets"
DRIVE_SCOPE = "https://www.googleapis.com/auth/drive"
DRIVE_FILE_SCOPE = "https://www.googleapis.com/auth/drive.file"


class ClientFactoryError(RuntimeError):
    pass


@dataclass(frozen=True)
class ClientSettings:
    timeout_s: int = 30
    retry: RetryConfig = field(default_factory=RetryConfig)


def _int_env(env: Mapping[str, str], key: str, default: int) -> int:
    raw = (env.get(key) or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ClientFactoryError(f"Invalid int env {key}={raw!r}") from e


def _float_env(env: Mapping[str, str], key: str, default: float) -> float:
    raw = (env.get(key) or "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ClientFactoryError(f"Invalid float env {key}={raw!r}") from e


def settings_from_env(env: Mapping[str, str] | None = None) -> ClientSettings:
    e = os.environ if env is None else env
    return ClientSettings(
        timeout_s=_int_env(e, "MI_HTTP_TIMEOUT_S", 30),
        retry=RetryConfig(
            max_attempts=_int_env(e, "MI_HTTP_MAX_RETRIES", 5),
            base_delay_s=_float_env(e, "MI_HTTP_BASE_DELAY_S", 0.5),
            max_delay_s=_float_env(e, "MI_HTTP_MAX_DELAY_S", 8.0),
            jitter_s=_float_env(e, "MI_HTTP_JITTER_S", 0.2),
        ),
    )


def sheets_scopes(*, use_service_account: bool) -> list[str]:
    # SA often needs the Drive scope to reach files shared with it
    return [SHEETS_SCOPE, DRIVE_SCOPE] if use_service_account else [SHEETS_SCOPE, DRIVE_FILE_SCOPE]


def _service_account_creds(sa_path: str, scopes: list[str]) -> object:
    p = Path(sa_path)
    if not p.exists():
        raise ClientFactoryError(f"Service Account JSON not found: {p}")
    return service_account.Credentials.from_service_account_file(  # type: ignore[no-untyped-call]
        str(p), scopes=scopes
    )


def _oauth_user_creds(cfg: AppConfig, scopes: list[str]) -> object:
    ga = cfg.google_auth
    missing = [
        k
        for k, v in {
            "GOOGLE_CLIENT_ID": ga.client_id,
            "GOOGLE_CLIENT_SECRET": ga.client_secret,
            "GOOGLE_REFRESH_TOKEN": ga.refresh_token,
        }.items()
        if not v
    ]
    if missing:
        raise ClientFactoryError(
            "OAuth user creds not configured.\n"
            f"Missing: {', '.join(missing)}\n"
            "Fix: set them in .env (local/dev) or your deployment env (prod),\n"
            "or point GOOGLE_SERVICE_ACCOUNT_JSON at a service account key.\n"
        )

    creds = oauth_credentials.Credentials(  # type: ignore[no-untyped-call]
        token=None,
        refresh_token=ga.refresh_token,
        token_uri="https://oauth2.googleapis.com/token",
        client_id=ga.client_id,
        client_secret=ga.client_secret,
        scopes=scopes,
    )
    creds.refresh(Request())  # fail fast
    return creds


def build_sheets_service(*, cfg: AppConfig, settings: ClientSettings) -> SheetsService:
    use_sa = cfg.google_auth.has_service_account
    scopes = sheets_scopes(use_service_account=use_sa)

    if use_sa:
        creds = _service_account_creds(cfg.google_auth.service_account_json or "", scopes)
    else:
        creds = _oauth_user_creds(cfg, scopes)

    # NOTE: google-auth-httplib2 is needed for this import.
    from google_auth_httplib2 import AuthorizedHttp

    http = AuthorizedHttp(creds, http=httplib2.Http(timeout=settings.timeout_s))

    svc = build("sheets", "v4", http=http, cache_discovery=False)
    return cast(SheetsService, svc)
