"""WSGI entrypoint for Gunicorn.

Usage:
  gunicorn -w 2 --threads 8 -b 0.0.0.0:${PORT:-5015} wsgi:app
"""

from luckydraw import create_app

app = create_app()
