import pytest
from google.cloud import compute_v1

from gcecloud.config import GCEConfig
from gcecloud.schemas.identity import AdapterIdentity, ComputeClients


@pytest.fixture
def identity(mocker):
    clients = ComputeClients(
        target_pools=mocker.Mock(),
        forwarding_rules=mocker.Mock(),
        instances=mocker.Mock(),
        region_operations=mocker.Mock(),
    )
    return AdapterIdentity(project_id="p", zone="us-central1-b", clients=clients)


@pytest.fixture
def config():
    return GCEConfig(operation_poll_interval=0, operation_timeout=5)


@pytest.fixture
def make_operation():
    def _make(name="op-1", status="DONE", errors=None):
        op = compute_v1.Operation(name=name, status=status)
        if errors:
            op.error = compute_v1.Error(
                errors=[compute_v1.Errors(code=code, message=msg) for code, msg in errors]
            )
        return op

    return _make
