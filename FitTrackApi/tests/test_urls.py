from django.test import Client
from django.urls import resolve


def test_kamal_health_check_url():
    client = Client()
    response = client.get("/kamal/up/")
    assert response.status_code == 200
    assert response.content == b"OK"
    match = resolve("/kamal/up/")
    assert match.func.__name__ == "health_check"
