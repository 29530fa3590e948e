from __future__ import annotations

# All outbound calls (geocoder, Overpass mirrors, fallback) go through requests sessions.
import requests


def safe_response_text(resp: requests.Response, *, limit: int = 500) -> str:
    # Error bodies from mirrors are often full HTML pages; log lines keep the first `limit` chars.
    try:
        text = resp.text
    except Exception:
        # Undecodable bodies still produce a log line instead of a second error.
        return "<unreadable response body>"
    return text.strip()[:limit]


def new_session(user_agent: str | None = None) -> requests.Session:
    # One session per client reuses connections across searches.
    session = requests.Session()
    # Set once here so every request from this session identifies the app.
    if user_agent:
        session.headers["User-Agent"] = user_agent
    return session
