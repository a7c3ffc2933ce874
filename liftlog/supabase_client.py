"""
LiftLog Analytics - Hosted backend client (Supabase PostgREST, read-only)

Fetches the session history and profile of one user. Nothing here writes to
the backend; persistence belongs to the app.
"""
import time

import pandas as pd
import requests

from liftlog.config import (
    DEFAULT_BODYWEIGHT,
    DEFAULT_WEEKLY_GOAL,
    PROFILES_TABLE,
    SESSIONS_TABLE,
    SUPABASE_ANON_KEY,
    SUPABASE_URL,
)
from liftlog.models import WorkoutSession
from liftlog.normalizer import to_timestamp

RATE_LIMIT_DELAY = 0.1  # seconds between requests
MAX_RETRIES = 3
RETRY_BACKOFF = 2  # exponential backoff multiplier
PAGE_SIZE = 1000
REQUEST_TIMEOUT = 15


def _headers(api_key: str) -> dict:
    return {
        "accept": "application/json",
        "apikey": api_key,
        "Authorization": f"Bearer {api_key}",
    }


def _get(
    table: str,
    params: dict,
    base_url: str = SUPABASE_URL,
    api_key: str = SUPABASE_ANON_KEY,
) -> list[dict]:
    """GET rows from a table with retry and rate limiting."""
    if not base_url:
        raise ValueError("SUPABASE_URL is not set")
    time.sleep(RATE_LIMIT_DELAY)
    url = f"{base_url.rstrip('/')}/rest/v1/{table}"
    for attempt in range(1, MAX_RETRIES + 1):
        try:
            r = requests.get(url, headers=_headers(api_key), params=params, timeout=REQUEST_TIMEOUT)
            if r.status_code == 429:
                wait = RETRY_BACKOFF ** attempt
                print(f"  ⏳ Backend rate limit, retrying in {wait}s (attempt {attempt}/{MAX_RETRIES})")
                time.sleep(wait)
                continue
            r.raise_for_status()
            return r.json()
        except requests.exceptions.Timeout:
            if attempt < MAX_RETRIES:
                print(f"  ⏳ Backend timeout, retrying (attempt {attempt}/{MAX_RETRIES})")
                time.sleep(RETRY_BACKOFF ** attempt)
            else:
                raise
        except requests.exceptions.HTTPError:
            if attempt < MAX_RETRIES and r.status_code >= 500:
                print(f"  ⏳ Backend {r.status_code}, retrying (attempt {attempt}/{MAX_RETRIES})")
                time.sleep(RETRY_BACKOFF ** attempt)
            else:
                raise
    raise requests.exceptions.RetryError(f"Backend request failed after {MAX_RETRIES} attempts")


def fetch_session_rows(
    user_id: str,
    base_url: str = SUPABASE_URL,
    api_key: str = SUPABASE_ANON_KEY,
) -> list[dict]:
    """Fetch every session row of a user, oldest first, paginated."""
    rows = []
    offset = 0
    while True:
        batch = _get(
            SESSIONS_TABLE,
            {
                "select": "*",
                "user_id": f"eq.{user_id}",
                "order": "date.asc",
                "limit": PAGE_SIZE,
                "offset": offset,
            },
            base_url,
            api_key,
        )
        rows.extend(batch)
        if len(batch) < PAGE_SIZE:
            break
        offset += PAGE_SIZE
    return rows


def rows_to_sessions(rows: list[dict]) -> list[WorkoutSession]:
    """Convert backend rows to sessions, sorted by date (stable, unparseable dates last)."""
    sessions = [WorkoutSession.from_dict(r) for r in rows]
    if not sessions:
        return []
    dates = pd.Series([to_timestamp(s.date) for s in sessions], dtype="datetime64[ns, UTC]")
    order = dates.sort_values(kind="mergesort", na_position="last").index
    return [sessions[i] for i in order]


def fetch_profile(
    user_id: str,
    base_url: str = SUPABASE_URL,
    api_key: str = SUPABASE_ANON_KEY,
) -> dict:
    """Fetch a user's profile row, or {} if there is none."""
    rows = _get(PROFILES_TABLE, {"select": "*", "id": f"eq.{user_id}", "limit": 1}, base_url, api_key)
    return rows[0] if rows else {}


def get_weekly_goal(profile: dict) -> int:
    """Declared weekly workout goal; defaults to 4 sessions."""
    goal = profile.get("weekly_goal") or profile.get("weeklyGoal")
    return int(goal) if goal else DEFAULT_WEEKLY_GOAL


def get_bodyweight(profile: dict) -> float:
    """Bodyweight from the profile, falling back to DEFAULT_BODYWEIGHT."""
    for name in ["bodyweight", "body_weight", "weight_kg", "weight"]:
        value = profile.get(name)
        if value is None:
            continue
        try:
            bw = float(value)
        except (TypeError, ValueError):
            continue
        if 20 < bw < 400:  # sanity check
            return bw
    return DEFAULT_BODYWEIGHT


class SupabaseSessionStore:
    """Session store backed by the hosted backend's REST API."""

    def __init__(self, base_url: str = SUPABASE_URL, api_key: str = SUPABASE_ANON_KEY):
        self.base_url = base_url
        self.api_key = api_key

    def get_sessions(self, identity: str) -> list[WorkoutSession]:
        return rows_to_sessions(fetch_session_rows(identity, self.base_url, self.api_key))

    def get_bodyweight(self, identity: str) -> float:
        return get_bodyweight(fetch_profile(identity, self.base_url, self.api_key))

    def get_weekly_goal(self, identity: str) -> int:
        return get_weekly_goal(fetch_profile(identity, self.base_url, self.api_key))
