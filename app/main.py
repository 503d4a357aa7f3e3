# app/main.py  (엔트리포인트: uvicorn app.main:app)
from dotenv import load_dotenv

# .env 로딩 (db/session.py reads DATABASE_URL at import time, so this comes first)
load_dotenv()

from app.backend.main import app as app  # noqa: E402
