"""Network capture for storm-data API traffic.

Every request is allowed through untouched. Requests and JSON responses
that look like data-API traffic are recorded so the payloads can be used
when the DOM yields no events.
"""

import json
from typing import Dict, List

from playwright.async_api import Error as PlaywrightError

from ..core.models import CapturedApiCall, CapturedResponse, StormEvent
from ..extractors.payload_normalizer import events_from_payload

REQUEST_PATTERNS = ['/api/', 'graphql', '/v1/', '/v2/']
RESPONSE_PATTERNS = ['/api/', 'graphql', 'events', 'storm']


class NetworkCapture:
    """
    Capture API calls and structured responses for one browser session.

    Both lists are append-only; handlers never block or rewrite traffic.
    """

    def __init__(self):
        self._calls: List[CapturedApiCall] = []
        self._responses: List[CapturedResponse] = []

    async def attach_to_page(self, page):
        """Install the allow-all route and the response listener."""
        await page.route("**/*", self._handle_route)
        page.on("response", self._handle_response)

    @staticmethod
    def is_api_request(url: str) -> bool:
        return any(pattern in url for pattern in REQUEST_PATTERNS)

    @staticmethod
    def is_data_response(url: str) -> bool:
        return any(pattern in url for pattern in RESPONSE_PATTERNS)

    async def _handle_route(self, route):
        """Record API-like requests, then let every request continue."""
        request = route.request
        try:
            if self.is_api_request(request.url):
                self._calls.append(CapturedApiCall(
                    url=request.url,
                    method=request.method,
                    headers=dict(request.headers),
                    body=request.post_data,
                ))
        finally:
            await route.continue_()

    async def _handle_response(self, response):
        """Keep responses whose body parses as JSON."""
        url = response.url
        if not self.is_data_response(url):
            return

        try:
            data = await response.json()
        except (PlaywrightError, ValueError, UnicodeDecodeError):
            # Not JSON, or the body is gone (redirects, closed page)
            return

        if data is not None:
            self._responses.append(CapturedResponse(
                url=url,
                status=response.status,
                data=data,
            ))

    def get_calls(self) -> List[CapturedApiCall]:
        return list(self._calls)

    def get_responses(self) -> List[CapturedResponse]:
        return list(self._responses)

    def extract_events(self) -> List[StormEvent]:
        """Normalize events from every captured response, in capture order."""
        events = []
        for response in self._responses:
            events.extend(events_from_payload(response.data))
        return events

    def event_sources(self) -> List[Dict]:
        """Captured responses that contributed at least one event."""
        return [
            response.to_dict()
            for response in self._responses
            if events_from_payload(response.data)
        ]

    def summary(self) -> Dict:
        return {
            'total_calls': len(self._calls),
            'total_responses': len(self._responses),
            'events_found': len(self.extract_events()),
        }

    def dump(self):
        """Print captured calls and responses for analysis."""
        print("\n📡 === CAPTURED API CALLS ===")
        print(f"Total requests: {len(self._calls)}")
        for i, call in enumerate(self._calls):
            print(f"\n[{i}] {call.method} {call.url}")
            if call.body:
                print(f"    Body: {call.body[:200]}...")

        print("\n📥 === CAPTURED RESPONSES ===")
        print(f"Total responses with data: {len(self._responses)}")
        for i, resp in enumerate(self._responses):
            print(f"\n[{i}] {resp.status} {resp.url}")
            print(f"    Data: {json.dumps(resp.data, default=str)[:300]}...")
        print("\n=== END API DUMP ===\n")
