"""SoleStore ASGI entry point.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

# PROTEAN_ENV selects the persistence overlay in solestore/domain.toml:
#   - unset        → in-memory stores
#   - "sqlite"     → local sqlite file (run `python src/manage.py setup-db` first)
#   - "production" → postgresql
from solestore.api.app import create_app
from solestore.domain import shop
from solestore.settings import get_settings

shop.init()

app = create_app(get_settings())
