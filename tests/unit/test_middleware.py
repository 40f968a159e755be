from fastapi import FastAPI, Request
from fastapi.testclient import TestClient

from app.middleware import RateLimitHeadersMiddleware, RequestContextMiddleware


def _app() -> FastAPI:
    app = FastAPI()
    app.add_middleware(RateLimitHeadersMiddleware)
    app.add_middleware(RequestContextMiddleware)

    @app.get("/limited")
    async def limited(request: Request):
        request.state.rate_limit_info = {
            "allowed": True,
            "limit": 5,
            "remaining": 4,
            "retry_after": None,
        }
        return {"request_id": request.state.request_id}

    return app


def test_rate_limit_headers_added():
    response = TestClient(_app()).get("/limited")

    assert response.status_code == 200
    assert response.headers["X-RateLimit-Limit"] == "5"
    assert response.headers["X-RateLimit-Remaining"] == "4"
    assert "Retry-After" not in response.headers


def test_request_id_generated_and_echoed():
    response = TestClient(_app()).get("/limited")

    request_id = response.headers["X-Request-ID"]
    assert request_id
    assert response.json()["request_id"] == request_id


def test_incoming_request_id_is_kept():
    response = TestClient(_app()).get("/limited", headers={"X-Request-ID": "trace-abc"})

    assert response.headers["X-Request-ID"] == "trace-abc"
