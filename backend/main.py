from webapp import create_app
from webapp.core.config import Settings
from webapp.core.logging_config import configure_logging

settings = Settings()
configure_logging(settings)

app = create_app(settings)
