"""Tests for view refreshing."""

import threading
from unittest.mock import Mock

import pytest

from docknobs.backends.couchdb import CouchDBClient
from docknobs.exceptions import ConfigurationError, RequestError
from docknobs.views import indexer_progress, refresh_views

DB = "http://couch.local:5984/orders"


class TestIndexerProgress:

    def test_no_indexers(self):
        assert indexer_progress([]) is None
        assert indexer_progress([{"type": "replication", "progress": 50}]) is None

    def test_average_rounds_half_up(self):
        tasks = [
            {"type": "indexer", "progress": 10},
            {"type": "indexer", "progress": 21},
            {"type": "replication", "progress": 90},
        ]
        assert indexer_progress(tasks) == 16

    def test_rounds_down_below_half(self):
        assert indexer_progress([{"type": "indexer", "progress": 2.4}]) == 2


class TestRefreshViews:

    @pytest.fixture
    def client(self):
        client = Mock(spec=CouchDBClient)
        client.get_design_documents.return_value = [
            {"_id": "_design/orders", "views": {"by_date": {}, "by_total": {}}},
            {"_id": "_design/validation", "validate_doc_update": "function () {}"},
        ]
        client.get_active_tasks.return_value = [{"type": "indexer", "progress": 50}]
        return client

    def test_queries_every_view(self, client):
        refresh_views(client, DB, sleep=Mock())

        assert [c.args for c in client.query_view.call_args_list] == [
            (DB, "_design/orders", "by_date", 1),
            (DB, "_design/orders", "by_total", 1),
        ]

    def test_reports_indexer_progress_while_building(self, client):
        built = threading.Event()

        def query_view(location, design_id, view_name, limit):
            built.wait(timeout=5)
            return {"rows": []}

        client.query_view.side_effect = query_view
        messages = []

        refresh_views(
            client, DB, progress_sink=messages.append,
            sleep=lambda seconds: built.set(),
        )

        assert "50% _design/orders/by_date" in messages
        assert set(messages) <= {"50% _design/orders/by_date", "50% _design/orders/by_total"}

    def test_query_errors_propagate(self, client):
        client.query_view.side_effect = RequestError(DB, 500, "os_process_error")
        with pytest.raises(RequestError, match="os_process_error"):
            refresh_views(client, DB, sleep=Mock())

    def test_location_is_required(self, client):
        with pytest.raises(ConfigurationError):
            refresh_views(client, "")
