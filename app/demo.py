"""Demo application whose traffic feeds the golden signals"""
from fastapi import FastAPI
from config import Config
from metrics.signals import GoldenSignals
from middleware.instrumentation import GoldenSignalsMiddleware, RequestLoggingMiddleware


class DemoApplication:
    """FastAPI app serving the main traffic on the application port"""

    def __init__(self, config: Config, signals: GoldenSignals):
        self.config = config
        self.signals = signals
        self.app = FastAPI(
            title=config.service_name,
            version=config.service_version,
            docs_url=None,
            redoc_url=None,
            openapi_url=None
        )

        self._setup_middleware()
        self._setup_routes()

    def _setup_middleware(self):
        # Last added is executed first, so request logging wraps the signals
        self.app.add_middleware(GoldenSignalsMiddleware, signals=self.signals)

        if self.config.enable_request_logging:
            self.app.add_middleware(RequestLoggingMiddleware)

    def _setup_routes(self):

        @self.app.get('/')
        def index():
            return {"message": "Hello World", "origin": self.config.origin}

    def get_app(self) -> FastAPI:
        """Get the FastAPI application"""
        return self.app
