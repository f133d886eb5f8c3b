"""
Gunicorn configuration for the Sermon Wizard deployment.

Usage:
    gunicorn sermon_wizard.main:app -c gunicorn.conf.py
"""

import os

bind = f"0.0.0.0:{os.getenv('PORT', '8000')}"

# Conversation sessions live in process memory; extra workers would each hold
# their own store, so conversations must stay on a single worker.
workers = int(os.getenv("WEB_CONCURRENCY", "1"))

# Use Uvicorn's ASGI worker for FastAPI
worker_class = "uvicorn.workers.UvicornWorker"

# Request timeout (seconds). Must exceed LLM_TIMEOUT_MS.
timeout = 120

keepalive = 5

# Logging
accesslog = "-"  # stdout
errorlog = "-"   # stderr
loglevel = "info"
