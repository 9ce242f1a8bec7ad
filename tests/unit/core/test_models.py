"""Tests for platform records."""

import pytest

from deployment_launcher.core.models import (
    Deployment,
    DeploymentStatus,
    Operation,
)


class TestDeploymentStatus:
    @pytest.mark.parametrize(
        "status,active",
        [
            (DeploymentStatus.STARTING, True),
            (DeploymentStatus.RUNNING, True),
            (DeploymentStatus.STOPPING, False),
            (DeploymentStatus.STOPPED, False),
            (DeploymentStatus.ERROR, False),
            (DeploymentStatus.UNKNOWN, False),
        ],
    )
    def test_is_active(self, status, active):
        assert status.is_active is active

    def test_display(self):
        assert str(DeploymentStatus.RUNNING) == "Running"


class TestDeployment:
    def test_from_platform_payload(self):
        deployment = Deployment.model_validate(
            {
                "id": "1234",
                "name": "main",
                "projectName": "my_project",
                "regionCode": "EU",
                "status": "running",
                "tag": ["my_tag"],
                "workerFlags": [
                    {"workerType": "coordinator", "key": "k", "value": "v"}
                ],
                "clusterCode": "eu3-prod",
            }
        )

        assert deployment.status == DeploymentStatus.RUNNING
        assert deployment.has_tag("my_tag")
        assert deployment.get_worker_flag("coordinator", "k") == "v"
        assert deployment.get_worker_flag("coordinator", "missing") is None

    def test_unrecognized_status_is_unknown(self):
        deployment = Deployment(name="d", projectName="p", status="HIBERNATING")

        assert deployment.status == DeploymentStatus.UNKNOWN

    def test_unknown_fields_survive_round_trip(self):
        deployment = Deployment.model_validate(
            {"name": "d", "projectName": "p", "clusterCode": "eu3-prod"}
        )

        assert deployment.to_payload()["clusterCode"] == "eu3-prod"

    def test_payload_uses_platform_names(self):
        deployment = Deployment(name="d", projectName="p", startingSnapshotId="s1")
        deployment.add_tag("a")
        deployment.add_tag("a")
        deployment.add_worker_flag("coordinator", "ready", "true")

        payload = deployment.to_payload()

        assert payload["projectName"] == "p"
        assert payload["startingSnapshotId"] == "s1"
        assert payload["tag"] == ["a"]
        assert payload["workerFlags"] == [
            {"workerType": "coordinator", "key": "ready", "value": "true"}
        ]
        assert "id" not in payload

    def test_str(self):
        assert str(Deployment(id="42", name="d", projectName="p")) == "Deployment:d:42"
        assert str(Deployment(name="d", projectName="p")) == "Deployment:d"


class TestOperation:
    def test_pending_has_no_result(self):
        operation = Operation(name="operations/1")

        assert operation.result_or_none() is None

    def test_done_with_response(self):
        operation = Operation.model_validate(
            {
                "name": "operations/1",
                "done": True,
                "response": {"id": "9", "name": "d", "projectName": "p"},
            }
        )

        assert operation.result_or_none().id == "9"

    def test_done_with_error(self):
        operation = Operation.model_validate(
            {
                "name": "operations/1",
                "done": True,
                "error": {"code": 9, "message": "boom"},
                "response": {"id": "9", "name": "d", "projectName": "p"},
            }
        )

        assert operation.result_or_none() is None
