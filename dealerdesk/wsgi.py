"""WSGI entry point: gunicorn dealerdesk.wsgi:app"""
from .app import create_app

app = create_app()
