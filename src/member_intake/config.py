from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path


class ConfigError(RuntimeError):
    pass


PROFILE_VALUES = ("local", "dev", "prod")


def _read_dotenv_file(path: Path) -> dict[str, str]:
    """
    Minimal dotenv reader:
    - supports KEY=VALUE
    - ignores empty lines + comments starting with #
    - no variable expansion
    """
    data: dict[str, str] = {}
    if not path.exists():
        return data

    for raw in path.read_text(encoding="utf-8").splitlines():
        line = raw.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        k, v = line.split("=", 1)
        key = k.strip()
        if key:
            data[key] = v.strip().strip('"').strip("'")
    return data


def _get_profile(env: Mapping[str, str]) -> str:
    profile = (env.get("MI_PROFILE") or "local").strip().lower()
    if profile not in PROFILE_VALUES:
        raise ConfigError(
            f"Invalid MI_PROFILE='{profile}'. Expected one of: {', '.join(PROFILE_VALUES)}"
        )
    return profile


def _as_bool(v: str | None, default: bool = False) -> bool:
    if v is None or not v.strip():
        return default
    return v.strip().lower() in {"1", "true", "yes", "y", "on"}


def _country_code(raw: str | None) -> str:
    code = (raw or "27").strip().lstrip("+")
    if not code.isdigit():
        raise ConfigError(f"Invalid MI_COUNTRY_CODE='{raw}'. Expected digits, e.g. 27")
    return code


@dataclass(frozen=True)
class GoogleAuthConfig:
    # Either a service account JSON path, or OAuth client id/secret + refresh token.
    service_account_json: str | None
    client_id: str | None
    client_secret: str | None
    refresh_token: str | None

    @property
    def has_service_account(self) -> bool:
        return bool((self.service_account_json or "").strip())

    @property
    def has_oauth(self) -> bool:
        return all(
            (v or "").strip() for v in (self.client_id, self.client_secret, self.refresh_token)
        )

    def validate(self, *, profile: str, sheet_id: str | None) -> None:
        # Auth only matters once members are written to a sheet.
        if profile == "prod" and sheet_id and not (self.has_service_account or self.has_oauth):
            raise ConfigError(
                "Prod auth is not configured for MI_SHEET_ID.\n"
                "Provide either:\n"
                "  - GOOGLE_SERVICE_ACCOUNT_JSON=/path/to/service_account.json\n"
                "or:\n"
                "  - GOOGLE_CLIENT_ID, GOOGLE_CLIENT_SECRET, GOOGLE_REFRESH_TOKEN\n"
            )


@dataclass(frozen=True)
class AppConfig:
    profile: str
    debug: bool
    log_level: str
    runs_dir: Path
    capture_address: bool
    country_code: str
    sheet_id: str | None
    sheet_tab: str
    google_auth: GoogleAuthConfig

    def to_safe_dict(self) -> dict[str, str]:
        def red(v: str | None) -> str:
            if not v:
                return ""
            s = v.strip()
            if len(s) <= 8:
                return "********"
            return f"{s[:3]}...{s[-3:]}"

        return {
            "MI_PROFILE": self.profile,
            "MI_DEBUG": str(self.debug),
            "MI_LOG_LEVEL": self.log_level,
            "MI_RUNS_DIR": str(self.runs_dir),
            "MI_CAPTURE_ADDRESS": str(self.capture_address),
            "MI_COUNTRY_CODE": self.country_code,
            "MI_SHEET_ID": self.sheet_id or "",
            "MI_SHEET_TAB": self.sheet_tab,
            "GOOGLE_SERVICE_ACCOUNT_JSON": self.google_auth.service_account_json or "",
            "GOOGLE_CLIENT_ID": red(self.google_auth.client_id),
            "GOOGLE_CLIENT_SECRET": red(self.google_auth.client_secret),
            "GOOGLE_REFRESH_TOKEN": red(self.google_auth.refresh_token),
        }


def load_config(
    *,
    env: Mapping[str, str] | None = None,
    base_dir: Path | None = None,
) -> AppConfig:
    """
    Loads config with profile support.

    Priority:
      1) OS env
      2) .env (if exists)
      3) .env.<profile> (if exists) overrides .env

    dotenv files only fill in variables missing from the OS env.
    """
    env0: Mapping[str, str] = os.environ if env is None else env
    profile = _get_profile(env0)

    root = base_dir or Path.cwd()

    dotenv = _read_dotenv_file(root / ".env")
    dotenv.update(_read_dotenv_file(root / f".env.{profile}"))

    merged = dict(env0)
    for k, v in dotenv.items():
        merged.setdefault(k, v)

    debug = _as_bool(merged.get("MI_DEBUG"), default=(profile != "prod"))
    log_level = (merged.get("MI_LOG_LEVEL") or ("INFO" if profile == "prod" else "DEBUG")).strip()
    runs_dir = Path((merged.get("MI_RUNS_DIR") or "runs").strip())

    capture_address = _as_bool(merged.get("MI_CAPTURE_ADDRESS"), default=False)
    country_code = _country_code(merged.get("MI_COUNTRY_CODE"))

    sheet_id = (merged.get("MI_SHEET_ID") or "").strip() or None
    sheet_tab = (merged.get("MI_SHEET_TAB") or "Members").strip()

    google_auth = GoogleAuthConfig(
        service_account_json=(merged.get("GOOGLE_SERVICE_ACCOUNT_JSON") or "").strip() or None,
        client_id=(merged.get("GOOGLE_CLIENT_ID") or "").strip() or None,
        client_secret=(merged.get("GOOGLE_CLIENT_SECRET") or "").strip() or None,
        refresh_token=(merged.get("GOOGLE_REFRESH_TOKEN") or "").strip() or None,
    )
    google_auth.validate(profile=profile, sheet_id=sheet_id)

    if profile in {"local", "dev"}:
        example_path = root / ".env.example"
        if not example_path.exists():
            raise ConfigError("Missing .env.example. Add it so local/dev setup is obvious.")

    return AppConfig(
        profile=profile,
        debug=debug,
        log_level=log_level,
        runs_dir=runs_dir,
        capture_address=capture_address,
        country_code=country_code,
        sheet_id=sheet_id,
        sheet_tab=sheet_tab,
        google_auth=google_auth,
    )
