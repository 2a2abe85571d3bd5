from fastapi.middleware.cors import CORSMiddleware

from nft_api.config import Config


def add_cors_middleware(app, origins=None):
    """Attach CORS middleware configured from ``Config.CORS_ORIGINS``."""
    origins = origins or Config.CORS_ORIGINS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        # Credentials cannot be combined with a wildcard origin
        allow_credentials="*" not in origins,
        allow_methods=["GET"],
        allow_headers=["*"],
    )
