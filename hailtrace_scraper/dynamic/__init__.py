"""Browser-side components.

Components:
    - browser_engine: Playwright session, login, navigation, screenshots
    - network_capture: passive recording of API traffic
    - element_locator: verification-gated strategy chains
    - search_orchestrator: address / coordinate / territory search
    - load_detector: skeleton-loader polling
    - page_inspector: debug dump of the page structure
"""

from .browser_engine import PlaywrightEngine
from .element_locator import ElementLocator, LocateResult, LocationTarget, Strategy
from .load_detector import LoadDetector, LoadState
from .network_capture import NetworkCapture
from .page_inspector import PageInspector
from .search_orchestrator import SearchOrchestrator, SearchOutcome, SearchState

__all__ = [
    'PlaywrightEngine',
    'ElementLocator',
    'LocateResult',
    'LocationTarget',
    'Strategy',
    'LoadDetector',
    'LoadState',
    'NetworkCapture',
    'PageInspector',
    'SearchOrchestrator',
    'SearchOutcome',
    'SearchState',
]
