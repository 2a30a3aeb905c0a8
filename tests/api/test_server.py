"""
Query API Tests

The API is strictly read-only and renders integers as decimal strings.
"""

import logging

import pytest
from fastapi.testclient import TestClient

from projector.api import create_app
from projector.api.mapper import map_entity_to_dto
from projector.contracts.base import position_id
from projector.contracts.entities import AgreementFramework
from projector.engine import ProjectorBackend, ProjectorConfig

from tests.fixtures import AGREEMENT_ID, FRAMEWORK, P1, P2, created, joined, setup


@pytest.fixture
def populated(backend):
    backend.process(setup(required_deposit=2 ** 200))
    backend.process(created(metadata_uri="ipfs://TwoParty"))
    backend.process(joined(party=P1, balance=1000))
    return backend


@pytest.fixture
def client(populated):
    return TestClient(create_app(populated))


class TestHealth:

    def test_health_reports_counts(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "online"
        assert body["counts"]["Agreement"] == 1
        assert body["counts"]["AgreementPosition"] == 2

    def test_uninitialized_backend_is_503(self):
        client = TestClient(create_app())
        assert client.get("/health").status_code == 503


class TestEntityEndpoints:

    def test_get_agreement(self, client):
        response = client.get(f"/api/v1/entities/Agreement/{AGREEMENT_ID}")

        assert response.status_code == 200
        body = response.json()
        assert body["id"] == AGREEMENT_ID
        assert body["title"] == "Two Party"
        assert body["status"] == "Ongoing"
        assert body["criteria"] == "1000"
        assert body["framework"] == FRAMEWORK

    def test_lookup_is_case_insensitive_on_id(self, client):
        pid = position_id(AGREEMENT_ID, P1).upper().replace("0X", "0x")
        response = client.get(f"/api/v1/entities/AgreementPosition/{pid}")

        assert response.status_code == 200
        assert response.json()["status"] == "Joined"

    def test_large_integers_are_strings(self, client):
        body = client.get(f"/api/v1/entities/AgreementFramework/{FRAMEWORK}").json()
        assert body["required_deposit"] == str(2 ** 200)

        position = client.get(
            f"/api/v1/entities/AgreementPosition/{position_id(AGREEMENT_ID, P1)}"
        ).json()
        assert position["deposit"] == str(2 ** 200)

    def test_kind_accepts_enum_name(self, client):
        response = client.get(f"/api/v1/entities/agreement_position/{position_id(AGREEMENT_ID, P2)}")

        assert response.status_code == 200
        assert response.json()["status"] == "Pending"

    def test_absent_entity_is_404(self, client):
        assert client.get("/api/v1/entities/Dispute/0xc8").status_code == 404

    def test_unknown_kind_is_404(self, client):
        assert client.get("/api/v1/entities/Token/0xc8").status_code == 404
        assert client.get("/api/v1/entities/Token/count").status_code == 404

    def test_count(self, client):
        response = client.get("/api/v1/entities/AgreementPosition/count")

        assert response.status_code == 200
        assert response.json() == {"kind": "AgreementPosition", "count": 2}

    def test_list_ordered_and_paged(self, client):
        body = client.get("/api/v1/entities/AgreementPosition?limit=1&offset=1").json()

        assert body["kind"] == "AgreementPosition"
        assert body["limit"] == 1
        assert body["offset"] == 1
        assert [item["party"] for item in body["items"]] == [P2]

    def test_list_rejects_bad_paging(self, client):
        assert client.get("/api/v1/entities/Agreement?limit=0").status_code == 422
        assert client.get("/api/v1/entities/Agreement?offset=-1").status_code == 422

    def test_write_methods_not_allowed(self, client):
        response = client.post(f"/api/v1/entities/Agreement/{AGREEMENT_ID}", json={})
        assert response.status_code == 405


class TestLifespan:

    def test_backend_built_from_environment(self, monkeypatch, tmp_path):
        monkeypatch.setenv("PROJECTOR_DB_PATH", str(tmp_path / "api.db"))
        monkeypatch.setenv("PROJECTOR_METADATA_ENABLED", "false")

        seeded = ProjectorBackend(ProjectorConfig.from_env())
        seeded.process(setup())

        with TestClient(create_app()) as client:
            body = client.get("/health").json()

        assert body["counts"]["AgreementFramework"] == 1

    def test_memory_store_warns(self, monkeypatch, caplog):
        monkeypatch.delenv("PROJECTOR_DB_PATH", raising=False)
        monkeypatch.delenv("PROJECTOR_STORE_BACKEND", raising=False)
        monkeypatch.setenv("PROJECTOR_METADATA_ENABLED", "false")
        monkeypatch.setenv("LOG_LEVEL", "INFO")

        with caplog.at_level(logging.WARNING, logger="projector.api.server"):
            with TestClient(create_app()) as client:
                assert client.get("/health").json()["status"] == "online"

        assert any("PROJECTOR_DB_PATH" in r.getMessage() for r in caplog.records)

    def test_sqlite_store_does_not_warn(self, monkeypatch, tmp_path, caplog):
        monkeypatch.setenv("PROJECTOR_DB_PATH", str(tmp_path / "api.db"))
        monkeypatch.setenv("PROJECTOR_METADATA_ENABLED", "false")

        with caplog.at_level(logging.WARNING, logger="projector.api.server"):
            with TestClient(create_app()):
                pass

        assert not any("PROJECTOR_DB_PATH" in r.getMessage() for r in caplog.records)


class TestMapper:

    def test_none_and_strings_pass_through(self):
        dto = map_entity_to_dto(AgreementFramework(id=FRAMEWORK))

        assert dto == {"id": FRAMEWORK, "arbitrator": None, "required_deposit": "0"}
