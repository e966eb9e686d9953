import json
import logging

import pytest
from organizations.models import Organization
from core.utils import make_it_unique
from core.utils.logging import JSONFormatter


@pytest.mark.django_db
def test_make_it_unique_returns_base_if_unique():
    unique = make_it_unique('foo', Organization, 'slug')
    assert unique == 'foo'
    Organization.objects.create(name='Test Gym', slug=unique)
    unique2 = make_it_unique('foo', Organization, 'slug')
    assert unique2 == 'foo-1'
    Organization.objects.create(name='Test Gym 2', slug=unique2)
    assert make_it_unique('foo', Organization, 'slug') == 'foo-2'


@pytest.mark.django_db
def test_make_it_unique_excludes_own_row():
    org = Organization.objects.create(name='Test Gym', slug='foo')
    assert make_it_unique('foo', Organization, 'slug', exclude_pk=org.pk) == 'foo'


def test_json_formatter_includes_context_keys():
    record = logging.LogRecord("audit", logging.INFO, __file__, 10, "audit:%s", ("join_request_accepted",), None)
    record.event = "join_request_accepted"
    record.org = 3
    data = json.loads(JSONFormatter().format(record))
    assert data["msg"] == "audit:join_request_accepted"
    assert data["level"] == "INFO"
    assert data["event"] == "join_request_accepted"
    assert data["org"] == 3
    assert "actor" not in data


def test_json_formatter_renders_exceptions():
    try:
        raise RuntimeError("sink down")
    except RuntimeError:
        import sys
        record = logging.LogRecord("audit", logging.ERROR, __file__, 10, "boom", (), sys.exc_info())
    data = json.loads(JSONFormatter().format(record))
    assert "RuntimeError: sink down" in data["exc"]
