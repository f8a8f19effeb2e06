"""TickTick API adapter - task store backed by TickTick projects."""

import logging
import re
import time
import webbrowser
from datetime import date, datetime, timedelta

import requests

from fourd.config import Config, Tokens, load_config
from fourd.core.categories import Category
from fourd.core.errors import NotAuthorizedError, PersistenceError
from fourd.core.tasks import AuthorizationState, ListHandle, Task

logger = logging.getLogger(__name__)

API_BASE = "https://api.ticktick.com/open/v1"
OAUTH_AUTHORIZE_URL = "https://ticktick.com/oauth/authorize"
OAUTH_TOKEN_URL = "https://ticktick.com/oauth/token"
REDIRECT_URI = "http://localhost:8080/callback"

STATUS_NORMAL = 0
STATUS_COMPLETED = 2

# Our priority bands -> TickTick's 0/1/3/5 scale (5 = high)
_TO_TICKTICK_PRIORITY = {"high": 5, "medium": 3, "low": 1, "none": 0}
_FROM_TICKTICK_PRIORITY = {5: 1, 3: 5, 1: 9, 0: 0}

_TRIGGER_PATTERN = re.compile(
    r"^TRIGGER:(-)?P(?:(\d+)D)?(?:T(?:(\d+)H)?(?:(\d+)M)?(?:(\d+)S)?)?$"
)


class AuthenticationError(NotAuthorizedError):
    """Raised when authentication fails."""

    pass


def to_trigger(alert: datetime, due_start: datetime) -> str:
    """Express an absolute alert as a TickTick trigger relative to the due day."""
    offset = alert - due_start
    sign = "-" if offset < timedelta(0) else ""
    offset = abs(offset)
    hours, rest = divmod(offset.seconds, 3600)
    minutes, seconds = divmod(rest, 60)
    return f"TRIGGER:{sign}P{offset.days}DT{hours}H{minutes}M{seconds}S"


def from_trigger(trigger: str, due_start: datetime) -> datetime | None:
    """Inverse of to_trigger. Returns None for unrecognized triggers."""
    match = _TRIGGER_PATTERN.match(trigger)
    if not match:
        return None
    sign, days, hours, minutes, seconds = match.groups()
    offset = timedelta(
        days=int(days or 0),
        hours=int(hours or 0),
        minutes=int(minutes or 0),
        seconds=int(seconds or 0),
    )
    return due_start - offset if sign else due_start + offset


def _parse_timestamp(value: str | None) -> datetime | None:
    """Parse a TickTick timestamp into a naive local datetime."""
    if not value:
        return None
    try:
        parsed = datetime.strptime(value, "%Y-%m-%dT%H:%M:%S.%f%z")
    except ValueError:
        try:
            parsed = datetime.strptime(value, "%Y-%m-%dT%H:%M:%S%z")
        except ValueError:
            logger.debug(f"Unparseable TickTick timestamp: {value!r}")
            return None
    return parsed.astimezone().replace(tzinfo=None)


def task_from_api(data: dict, category: Category) -> Task:
    """Create Task from TickTick API response."""
    due = None
    if data.get("dueDate"):
        due = date.fromisoformat(data["dueDate"].split("T")[0])
    task = Task(
        id=data["id"],
        title=data["title"],
        category=category,
        priority=_FROM_TICKTICK_PRIORITY.get(data.get("priority", 0), 0),
        due_date=due,
        notes=data.get("content") or None,
        completed=data.get("status", STATUS_NORMAL) == STATUS_COMPLETED,
        completed_at=_parse_timestamp(data.get("completedTime")),
        created_at=_parse_timestamp(data.get("createdTime")),
        list_id=data.get("projectId", ""),
    )
    due_start = task.due_start()
    if due_start is not None:
        for trigger in data.get("reminders") or []:
            alert = from_trigger(trigger, due_start)
            if alert is not None:
                task.alerts.append(alert)
    return task


def task_to_api(task: Task, timezone: str = "") -> dict:
    """Serialize a Task into a TickTick create/update payload."""
    payload = {
        "title": task.title,
        "projectId": task.list_id,
        "content": task.notes or "",
        "priority": _TO_TICKTICK_PRIORITY[task.priority_band.value],
        "status": STATUS_COMPLETED if task.completed else STATUS_NORMAL,
    }
    if task.id:
        payload["id"] = task.id
    due_start = task.due_start()
    if due_start is not None:
        payload["dueDate"] = f"{task.due_date.isoformat()}T00:00:00+0000"
        payload["isAllDay"] = True
        payload["reminders"] = [to_trigger(a, due_start) for a in task.alerts]
    else:
        payload["dueDate"] = None
        payload["reminders"] = []
    if timezone:
        payload["timeZone"] = timezone
    return payload


def _created_id(data, kind: str) -> str:
    """Id from a create response."""
    if not isinstance(data, dict) or not data.get("id"):
        raise PersistenceError(f"TickTick returned no id for the new {kind}", ValueError(repr(data)))
    return data["id"]


class TickTickTaskStore:
    """
    TickTick API adapter.

    Implements TaskStore protocol with one TickTick project per list. Handles
    authentication, token refresh, and API calls. No business logic - just I/O.
    """

    def __init__(self, config: Config | None = None, tokens: Tokens | None = None):
        self.config = config or load_config()
        self.tokens = tokens or Tokens.load()
        self._session = requests.Session()
        self._projects: dict[str, ListHandle] = {}
        # Project each known task lives in on the server
        self._task_projects: dict[str, str] = {}

    def _ensure_valid_token(self) -> None:
        """Refresh token if expired or expiring soon."""
        if not self.tokens.access_token:
            raise AuthenticationError("No access token. Run 'fourd auth' first.")

        # Refresh if expiring within 5 minutes
        if self.tokens.expires_at and time.time() >= self.tokens.expires_at - 300:
            self._refresh_token()

    def _refresh_token(self) -> None:
        """Refresh the access token."""
        if not self.tokens.refresh_token:
            raise AuthenticationError("No refresh token. Run 'fourd auth' first.")

        try:
            resp = self._session.post(
                OAUTH_TOKEN_URL,
                data={
                    "client_id": self.config.ticktick_client_id,
                    "client_secret": self.config.ticktick_client_secret,
                    "refresh_token": self.tokens.refresh_token,
                    "grant_type": "refresh_token",
                },
            )
        except requests.RequestException as e:
            raise PersistenceError("TickTick token refresh failed", e) from e

        if resp.status_code != 200:
            raise AuthenticationError(f"Token refresh failed: {resp.text}")

        try:
            data = resp.json()
            self.tokens.access_token = data["access_token"]
        except (ValueError, KeyError, TypeError) as e:
            raise AuthenticationError(f"Token refresh returned an invalid response: {e}") from e
        if "refresh_token" in data:
            self.tokens.refresh_token = data["refresh_token"]
        self.tokens.expires_at = int(time.time()) + data.get("expires_in", 3600)
        try:
            self.tokens.save()
        except OSError as e:
            raise PersistenceError("Failed to save refreshed TickTick tokens", e) from e

    def _api_request(self, method: str, endpoint: str, payload: dict | None = None) -> dict | list | None:
        """Make authenticated API request."""
        self._ensure_valid_token()
        try:
            resp = self._session.request(
                method,
                f"{API_BASE}{endpoint}",
                headers={"Authorization": f"Bearer {self.tokens.access_token}"},
                json=payload,
            )
            resp.raise_for_status()
            if not resp.content:
                return None
            return resp.json()
        except (requests.RequestException, ValueError) as e:
            raise PersistenceError(f"TickTick {method} {endpoint} failed", e) from e

    def authorize(self) -> AuthorizationState:
        if not self.tokens.access_token:
            if not self.config.ticktick_client_id:
                return AuthorizationState.DENIED
            return AuthorizationState.NOT_DETERMINED
        try:
            self._ensure_valid_token()
        except AuthenticationError as e:
            logger.warning(f"TickTick authorization failed: {e}")
            return AuthorizationState.DENIED
        return AuthorizationState.GRANTED

    def list_lists(self) -> dict[str, ListHandle]:
        projects = self._api_request("GET", "/project") or []
        self._projects = {p["id"]: ListHandle(id=p["id"], title=p["name"]) for p in projects}
        return dict(self._projects)

    def create_list(self, title: str) -> ListHandle:
        data = self._api_request("POST", "/project", {"name": title})
        handle = ListHandle(id=_created_id(data, "project"), title=data.get("name", title))
        self._projects[handle.id] = handle
        logger.info(f"Created TickTick project {title!r}")
        return handle

    def fetch_incomplete(self, handle: ListHandle) -> list[Task]:
        category = Category.from_list_title(handle.title)
        if category is None:
            logger.warning(f"Project {handle.title!r} is not a 4D list, skipping")
            return []

        data = self._api_request("GET", f"/project/{handle.id}/data") or {}
        tasks = []
        for task_data in data.get("tasks", []):
            task = task_from_api(task_data, category)
            if task.completed:
                continue
            self._task_projects[task.id] = handle.id
            tasks.append(task)
        return tasks

    def save(self, task: Task) -> Task:
        old_project = self._task_projects.get(task.id) if task.id else None
        if old_project and old_project != task.list_id:
            # Moving between projects: recreate in the new one, then drop the old copy
            stale = Task(id=task.id, title=task.title, category=task.category, list_id=old_project)
            task.id = ""
            self._create(task)
            self._delete(stale)
            return task

        if task.id:
            self._api_request("POST", f"/task/{task.id}", task_to_api(task, self.config.timezone))
            if task.completed:
                self._api_request("POST", f"/project/{task.list_id}/task/{task.id}/complete")
        else:
            self._create(task)
        return task

    def _create(self, task: Task) -> None:
        data = self._api_request("POST", "/task", task_to_api(task, self.config.timezone))
        task.id = _created_id(data, "task")
        self._task_projects[task.id] = task.list_id

    def _delete(self, task: Task) -> None:
        self._api_request("DELETE", f"/project/{task.list_id}/task/{task.id}")
        self._task_projects.pop(task.id, None)

    def remove(self, task: Task) -> None:
        self._delete(task)


def authorize(config: Config | None = None) -> Tokens:
    """Run OAuth authorization flow."""
    config = config or load_config()

    if not config.ticktick_client_id or not config.ticktick_client_secret:
        raise AuthenticationError(
            "Missing TickTick credentials. Add them to config/fourd.conf"
        )

    auth_url = (
        f"{OAUTH_AUTHORIZE_URL}"
        f"?client_id={config.ticktick_client_id}"
        f"&scope=tasks:read%20tasks:write"
        f"&redirect_uri={REDIRECT_URI}"
        f"&response_type=code"
    )

    print("Opening browser for TickTick authorization...")
    webbrowser.open(auth_url)

    print("\nAfter authorizing, you'll be redirected to a page that won't load.")
    print("Copy the 'code' parameter from the URL.\n")

    code = input("Paste the code here: ").strip()
    if not code:
        raise AuthenticationError("No code provided")

    print("Exchanging code for tokens...")
    resp = requests.post(
        OAUTH_TOKEN_URL,
        data={
            "client_id": config.ticktick_client_id,
            "client_secret": config.ticktick_client_secret,
            "code": code,
            "grant_type": "authorization_code",
            "redirect_uri": REDIRECT_URI,
        },
    )

    if resp.status_code != 200:
        raise AuthenticationError(f"Token exchange failed: {resp.text}")

    data = resp.json()
    tokens = Tokens(
        access_token=data["access_token"],
        refresh_token=data.get("refresh_token", ""),
        expires_at=int(time.time()) + data.get("expires_in", 3600),
    )
    tokens.save()

    print("Authentication successful!")
    return tokens
