"""
API Module

HTTP surface of the VideoTube backend (FastAPI).

    api/
    ├── main.py           ← create_application() and the served `app`
    ├── routes.py         ← Router mounting under API_PREFIX
    ├── dependencies/     ← Sessions, auth, services, uploads
    ├── handlers/         ← Route handlers (auth, user, channel, health)
    └── middleware/       ← Exception handlers, request context

Run with:
    uvicorn src.api.main:app --reload
"""
