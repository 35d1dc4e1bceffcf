"""ASGI entrypoint.

Run with: uvicorn surveydesk.asgi:app
"""

from surveydesk.main import create_app

app = create_app()
