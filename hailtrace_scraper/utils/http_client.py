"""Direct GraphQL client for HailTrace weather events."""

import time
from datetime import date, datetime, timedelta, timezone
from typing import Dict, List, Optional

import requests

from ..core.config import Credentials, ScraperConfig
from ..core.exceptions import APIError, AuthenticationError

SIGNIFICANT_HAIL = 1.0  # inches

AUTHENTICATE_MUTATION = """
mutation Authenticate($input: AuthenticationInput!) {
  authenticate(input: $input) {
    message
    session {
      token
    }
  }
}
"""

SESSION_USER_QUERY = """
query SessionUser {
  sessionUser {
    _id
    firstName
    lastName
    email
    enabledWeatherTypes
    company {
      _id
      name
    }
  }
}
"""

FILTER_EVENTS_QUERY = """
query FilterWeatherEvents($input: FilterWeatherEventsInput!) {
  filterWeatherEvents(input: $input) {
    page
    total
    results {
      id
      types
      eventDate
      maxAlgorithmHailSize
      maxMeteorologistHailSize
      maxMeteorologistWindSpeedMPH
      maxMeteorologistWindStarLevel
    }
  }
}
"""

LATEST_EVENT_QUERY = """
query {
  getLatestWeatherEvent {
    id
    types
    eventDate
    maxAlgorithmHailSize
    maxMeteorologistHailSize
    maxMeteorologistWindSpeedMPH
  }
}
"""


def hail_size(event: Dict) -> float:
    """Algorithm hail size, else the meteorologist's, else 0."""
    return event.get('maxAlgorithmHailSize') or event.get('maxMeteorologistHailSize') or 0


def default_date_range(today: date = None) -> Dict[str, str]:
    """The last 365 days as YYYY-MM-DD strings."""
    today = today or datetime.now(timezone.utc).date()
    return {
        'startDate': (today - timedelta(days=365)).isoformat(),
        'endDate': today.isoformat(),
    }


def filter_min_hail(events: List[Dict], min_hail: Optional[float]) -> List[Dict]:
    if not min_hail:
        return events
    return [e for e in events if hail_size(e) >= min_hail]


def summarize_by_month(events: List[Dict]) -> Dict[str, Dict]:
    """Per-month {count, maxHail, maxWind}, keyed YYYY-MM, sorted."""
    by_month: Dict[str, Dict] = {}
    for event in events:
        month = (event.get('eventDate') or '')[:7]
        bucket = by_month.setdefault(month, {'count': 0, 'maxHail': 0, 'maxWind': 0})
        bucket['count'] += 1
        bucket['maxHail'] = max(bucket['maxHail'], hail_size(event))
        bucket['maxWind'] = max(bucket['maxWind'], event.get('maxMeteorologistWindSpeedMPH') or 0)
    return dict(sorted(by_month.items()))


def significant_events(events: List[Dict], threshold: float = SIGNIFICANT_HAIL) -> List[Dict]:
    return [e for e in events if hail_size(e) >= threshold]


class HailTraceAPI:
    """
    Talks to the HailTrace GraphQL endpoint with a bearer token.

    Much faster than driving the dashboard, but only covers the weather
    event feed for the whole account, not a per-address report.
    """

    HEADERS = {
        'Content-Type': 'application/json',
        'Accept': 'application/json',
        'Origin': 'https://app.hailtrace.com',
        'Referer': 'https://app.hailtrace.com/',
    }

    PAGE_SIZE = 100
    PAGE_DELAY = 0.2  # seconds between pages
    MAX_RETRIES = 3

    def __init__(self, config: ScraperConfig = None, timeout: int = 30, session: requests.Session = None):
        self.config = config or ScraperConfig()
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update(self.HEADERS)
        self.token: Optional[str] = None
        self.user_info: Optional[Dict] = None

    @property
    def user_id(self) -> Optional[str]:
        return self.user_info.get('_id') if self.user_info else None

    def graphql_request(self, query: str, variables: Dict = None, requires_auth: bool = True) -> Dict:
        """
        POST one GraphQL operation.

        Returns:
            The decoded response envelope ({'data': ..., 'errors': ...})

        Raises:
            APIError: network failure after retries, or a non-JSON body
        """
        headers = {}
        if requires_auth and self.token:
            headers['Authorization'] = f"Bearer {self.token}"

        payload = {'query': query, 'variables': variables or {}}

        for attempt in range(self.MAX_RETRIES):
            try:
                response = self.session.post(
                    self.config.graphql_url,
                    json=payload,
                    headers=headers,
                    timeout=self.timeout,
                )
                return response.json()
            except requests.exceptions.Timeout as e:
                if attempt == self.MAX_RETRIES - 1:
                    raise APIError(f"GraphQL request timed out after {self.MAX_RETRIES} attempts") from e
                time.sleep(2 + attempt)
            except ValueError as e:
                # requests' JSONDecodeError is also a RequestException
                raise APIError(f"GraphQL response was not JSON (HTTP {response.status_code})") from e
            except requests.exceptions.RequestException as e:
                raise APIError(f"GraphQL request failed: {e}") from e

    def login(self, credentials: Credentials) -> Dict:
        """
        Exchange email/password for a session token, then load the user.

        Raises:
            AuthenticationError: no token in the response
        """
        print(f"🔐 Logging in as {credentials.email}...")

        variables = {
            'input': {
                'email': credentials.email,
                'password': credentials.password,
                'type': 'BASIC',
                'deviceType': 'WEB',
            }
        }
        result = self.graphql_request(AUTHENTICATE_MUTATION, variables, requires_auth=False)

        session = ((result.get('data') or {}).get('authenticate') or {}).get('session') or {}
        token = session.get('token')
        if not token:
            errors = result.get('errors') or []
            message = errors[0].get('message') if errors else None
            raise AuthenticationError('API login failed', message or 'no session token returned')

        self.token = token
        print("✅ Login successful")
        return self.get_user_info()

    def get_user_info(self) -> Optional[Dict]:
        result = self.graphql_request(SESSION_USER_QUERY)
        user = (result.get('data') or {}).get('sessionUser')

        if user:
            self.user_info = user
            print(f"👤 User: {user.get('firstName')} {user.get('lastName')}")
            print(f"🏢 Company: {(user.get('company') or {}).get('name')}")
            print(f"🌦️ Weather Types: {', '.join(user.get('enabledWeatherTypes') or [])}")

        return user

    def get_weather_events(self, start_date: str, end_date: str,
                           limit: int = PAGE_SIZE, page: int = 0) -> Optional[Dict]:
        """One page of filterWeatherEvents: {page, total, results}. None on GraphQL errors."""
        variables = {
            'input': {
                'page': page,
                'limit': limit,
                'startDate': start_date,
                'endDate': end_date,
            }
        }
        result = self.graphql_request(FILTER_EVENTS_QUERY, variables)

        if result.get('errors'):
            print(f"✗ GraphQL errors: {result['errors']}")
            return None

        return (result.get('data') or {}).get('filterWeatherEvents')

    def get_latest_weather_event(self) -> Optional[Dict]:
        result = self.graphql_request(LATEST_EVENT_QUERY)
        return (result.get('data') or {}).get('getLatestWeatherEvent')

    def get_all_events(self, start_date: str, end_date: str, min_hail: float = None,
                       limit: int = 100, start_page: int = 0) -> List[Dict]:
        """
        Page through filterWeatherEvents until a short page, the reported
        total, or `limit` events.
        """
        print(f"🌩️ Fetching weather events ({start_date} to {end_date})...")

        events: List[Dict] = []
        page = start_page
        page_size = min(limit, self.PAGE_SIZE)

        while len(events) < limit:
            batch = self.get_weather_events(start_date, end_date, limit=page_size, page=page)
            if not batch or not batch.get('results'):
                break

            results = batch['results']
            total = batch.get('total') or 0
            events.extend(results)
            print(f"   Page {page}: {len(results)} events (total so far: {len(events)}/{total})")

            if len(results) < page_size or len(events) >= total:
                break

            page += 1
            time.sleep(self.PAGE_DELAY)

        if min_hail:
            events = filter_min_hail(events, min_hail)
            print(f"   Filtered to {len(events)} events with hail >= {min_hail}\"")

        return events[:limit]

    def build_export(self, events: List[Dict], query: Dict) -> Dict:
        """JSON export document: query echo, user, summary and flattened events."""
        user = self.user_info or {}
        return {
            'query': query,
            'user': {
                'name': f"{user.get('firstName')} {user.get('lastName')}",
                'company': (user.get('company') or {}).get('name'),
                'enabledTypes': user.get('enabledWeatherTypes'),
            },
            'summary': {
                'totalEvents': len(events),
                'significantEvents': len(significant_events(events)),
                'byMonth': summarize_by_month(events),
            },
            'events': [
                {
                    'id': e.get('id'),
                    'date': e.get('eventDate'),
                    'types': e.get('types'),
                    'hailSize': hail_size(e) or None,
                    'hailSizeAlgorithm': e.get('maxAlgorithmHailSize'),
                    'hailSizeMeteo': e.get('maxMeteorologistHailSize'),
                    'windSpeed': e.get('maxMeteorologistWindSpeedMPH'),
                    'windStarLevel': e.get('maxMeteorologistWindStarLevel'),
                }
                for e in events
            ],
            'extractedAt': datetime.now(timezone.utc).isoformat(),
        }
