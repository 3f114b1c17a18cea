# =============================================================================
# tests/unit/test_remote_client.py
# Unit Tests for RemoteDataClient
# =============================================================================

import json
from unittest.mock import MagicMock

import pytest
import requests

from conftest import last_request, make_record, make_response
from eco_core.api import RemoteDataClient
from eco_core.auth import InMemorySessionGateway
from eco_core.errors import (
    AuthError,
    ConfirmationRequiredError,
    MalformedPayloadError,
    NetworkError,
    RemoteAPIError,
)


def records_response(*records):
    return make_response(200, {"success": True, "data": {"records": list(records)}})


class TestRequestShape:

    def test_get_data_sends_bearer_token_and_params(self, remote_client, http_session):
        http_session.request.return_value = records_response(make_record("2024-01-01"))

        records = remote_client.get_data({"limit": 5, "sortBy": "date", "startDate": None})

        call = last_request(http_session)
        assert call["method"] == "GET"
        assert call["url"] == "https://api.test/api/data"
        assert call["params"] == {"limit": 5, "sortBy": "date"}
        assert call["json"] is None
        assert call["timeout"] == 5
        assert call["headers"]["Authorization"] == "Bearer tok-123"
        assert call["headers"]["Content-Type"] == "application/json"
        assert records[0].date.isoformat() == "2024-01-01"

    def test_no_authorization_without_token(self, api_config, http_session):
        client = RemoteDataClient(api_config, InMemorySessionGateway(), http_session=http_session)
        http_session.request.return_value = records_response()

        client.get_data()

        assert "Authorization" not in last_request(http_session)["headers"]

    def test_save_entry_posts_without_id(self, remote_client, http_session):
        record = make_record("2024-01-02", 10, 5, 2, 30)
        record["id"] = 9

        assert remote_client.save_entry(record)

        call = last_request(http_session)
        assert call["method"] == "POST"
        assert call["url"].endswith("/data")
        assert call["json"] == {
            "date": "2024-01-02",
            "powerConsumption": 10.0,
            "drinkingWater": 5.0,
            "irrigationWater": 2.0,
            "electricityPrice": 30.0,
        }

    def test_update_and_delete_address_by_id(self, remote_client, http_session):
        remote_client.update_entry(17, make_record("2024-01-02"))
        assert last_request(http_session)["method"] == "PUT"
        assert last_request(http_session)["url"].endswith("/data/17")

        remote_client.delete_entry(17)
        assert last_request(http_session)["method"] == "DELETE"
        assert last_request(http_session)["url"].endswith("/data/17")

    def test_unsuccessful_flag_is_false(self, remote_client, http_session):
        http_session.request.return_value = make_response(200, {"success": False})
        assert remote_client.delete_entry(1) is False

    def test_import_records_body(self, remote_client, http_session):
        remote_client.import_records([make_record("2024-01-01")], overwrite_existing=True)

        body = last_request(http_session)["json"]
        assert body["overwriteExisting"] is True
        assert body["records"][0]["date"] == "2024-01-01"


class TestClearAll:

    def test_unconfirmed_sends_nothing(self, remote_client, http_session):
        with pytest.raises(ConfirmationRequiredError):
            remote_client.clear_all_data()

        http_session.request.assert_not_called()

    def test_confirmed_sends_confirm_body(self, remote_client, http_session):
        assert remote_client.clear_all_data(confirm=True)

        call = last_request(http_session)
        assert call["method"] == "DELETE"
        assert call["url"] == "https://api.test/api/data"
        assert call["json"] == {"confirm": True}


class TestErrors:

    def test_server_message_surfaces(self, remote_client, http_session):
        http_session.request.return_value = make_response(400, {"message": "Date already exists"})

        with pytest.raises(RemoteAPIError) as exc:
            remote_client.save_entry(make_record("2024-01-01"))

        assert exc.value.message == "Date already exists"
        assert exc.value.status == 400

    def test_generic_message_without_body(self, remote_client, http_session):
        http_session.request.return_value = make_response(500, text="")

        with pytest.raises(RemoteAPIError) as exc:
            remote_client.get_data()

        assert exc.value.message == "API Error: 500"

    @pytest.mark.parametrize("status", [401, 403])
    def test_auth_failures(self, remote_client, http_session, status):
        http_session.request.return_value = make_response(status, {"message": "Forbidden"})

        with pytest.raises(AuthError) as exc:
            remote_client.get_logs()

        assert exc.value.status == status

    def test_connection_failure(self, remote_client, http_session):
        http_session.request.side_effect = requests.exceptions.ConnectionError("refused")

        with pytest.raises(NetworkError):
            remote_client.get_data()

    def test_timeout(self, remote_client, http_session):
        http_session.request.side_effect = requests.exceptions.ReadTimeout()

        with pytest.raises(NetworkError) as exc:
            remote_client.get_data()

        assert "timed out" in exc.value.message

    def test_non_json_success_body(self, remote_client, http_session):
        http_session.request.return_value = make_response(200, text="<html></html>")

        with pytest.raises(MalformedPayloadError):
            remote_client.get_data()

    def test_invalid_record_in_response(self, remote_client, http_session):
        http_session.request.return_value = records_response({"date": "2024-01-01"})

        with pytest.raises(MalformedPayloadError):
            remote_client.get_data()


class TestPrice:

    def test_price_from_latest_record(self, remote_client, http_session):
        http_session.request.return_value = records_response(make_record("2024-01-09", price=27.3))

        assert remote_client.get_electricity_price() == 27.3
        assert last_request(http_session)["params"] == {"limit": 1, "sortBy": "date", "sortOrder": "desc"}

    def test_price_default_when_empty(self, remote_client, http_session):
        http_session.request.return_value = records_response()
        assert remote_client.get_electricity_price() == 25.0

    def test_price_default_on_failure(self, remote_client, http_session):
        http_session.request.side_effect = requests.exceptions.ConnectionError("down")
        assert remote_client.get_electricity_price() == 25.0


class TestExportAndLogs:

    def test_json_export_downloads_payload(self, api_config, session_gateway, http_session):
        downloader = MagicMock()
        client = RemoteDataClient(api_config, session_gateway, downloader=downloader, http_session=http_session)
        http_session.request.return_value = make_response(
            200, {"success": True, "data": [make_record("2024-01-01")]}
        )

        payload = client.export_data("json", "dump.json")

        assert last_request(http_session)["params"] == {"format": "json", "filename": "dump.json"}
        assert payload.filename == "dump.json"
        assert '"powerConsumption": 10.0' in payload.content
        downloader.assert_called_once_with(payload)

    def test_json_export_of_empty_data(self, remote_client, http_session):
        http_session.request.return_value = make_response(200, {"success": True, "data": []})

        payload = remote_client.export_data("json")

        assert json.loads(payload.content) == []

    def test_csv_export_converts_records(self, remote_client, http_session):
        http_session.request.return_value = records_response(make_record("2024-01-01"))

        payload = remote_client.export_data("csv")

        assert payload.content.split("\n")[1] == "2024-01-01,10,5,2,25"

    def test_get_logs(self, remote_client, http_session):
        http_session.request.return_value = make_response(200, {"success": True, "data": [{"action": "login"}]})

        assert remote_client.get_logs({"limit": 10}) == [{"action": "login"}]
        assert last_request(http_session)["url"].endswith("/logs")
