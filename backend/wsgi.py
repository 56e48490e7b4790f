# backend/wsgi.py
from tooladmin import create_app

app = create_app()
