# Deploy: set secrets and run 'uvicorn server:app --host=0.0.0.0 --port=8000'
import logging

from happy_meter.api import create_app

logging.basicConfig(level=logging.INFO, handlers=[logging.StreamHandler()])

app = create_app()

__all__ = ["app"]
