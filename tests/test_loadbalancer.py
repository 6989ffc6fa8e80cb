import logging

import pytest
from google.api_core import exceptions
from google.cloud import compute_v1

from gcecloud.config import GCEConfig
from gcecloud.exceptions import (
    OperationFailed,
    OperationTimeout,
    PoolCreationFailed,
    ProviderRequestFailed,
    RuleCreationFailed,
)
from gcecloud.gce.loadbalancer import (
    create_tcp_load_balancer,
    delete_tcp_load_balancer,
    get_load_balancer_phase,
    tcp_load_balancer_exists,
    update_tcp_load_balancer,
)
from gcecloud.schemas.cloud import LoadBalancerPhase

HOST_LINK = "https://www.googleapis.com/compute/v1/projects/p/zones/us-central1-b/instances/"
POOL_LINK = "https://www.googleapis.com/compute/v1/projects/p/regions/us-central1/targetPools/lb1"


def test_create_pool_then_rule(identity, config, make_operation):
    pools = identity.clients.target_pools
    rules = identity.clients.forwarding_rules

    order = []
    pools.insert.side_effect = lambda **kw: order.append("pool") or make_operation("op-pool")
    rules.insert.side_effect = lambda **kw: order.append("rule") or make_operation("op-rule")

    create_tcp_load_balancer(
        identity, "lb1", "us-central1", 80, ["node-a.c.p.internal"], config
    )

    assert order == ["pool", "rule"]

    # 1. Target pool with one canonicalized instance link
    pool_kwargs = pools.insert.call_args.kwargs
    assert pool_kwargs["project"] == "p"
    assert pool_kwargs["region"] == "us-central1"
    pool = pool_kwargs["target_pool_resource"]
    assert pool.name == "lb1"
    assert list(pool.instances) == [HOST_LINK + "node-a"]

    # 2. TCP forwarding rule on port 80 targeting the pool
    rule = rules.insert.call_args.kwargs["forwarding_rule_resource"]
    assert rule.name == "lb1"
    assert rule.I_p_protocol == "TCP"
    assert rule.port_range == "80"
    assert rule.target == POOL_LINK


def test_create_pool_failure_skips_rule(identity, config):
    identity.clients.target_pools.insert.side_effect = exceptions.Forbidden("denied")

    with pytest.raises(PoolCreationFailed) as exc_info:
        create_tcp_load_balancer(identity, "lb1", "us-central1", 80, ["node-a"], config)

    assert exc_info.value.pool_link is None
    identity.clients.forwarding_rules.insert.assert_not_called()


def test_create_pool_operation_failure_skips_rule(identity, config, make_operation):
    identity.clients.target_pools.insert.return_value = make_operation(
        "op-pool", errors=[("QUOTA_EXCEEDED", "Quota exceeded")]
    )

    with pytest.raises(PoolCreationFailed) as exc_info:
        create_tcp_load_balancer(identity, "lb1", "us-central1", 80, ["node-a"], config)

    assert isinstance(exc_info.value.__cause__, OperationFailed)
    identity.clients.forwarding_rules.insert.assert_not_called()


def test_create_rule_failure_orphans_pool(identity, config, make_operation):
    identity.clients.target_pools.insert.return_value = make_operation("op-pool")
    identity.clients.forwarding_rules.insert.side_effect = exceptions.Conflict("in use")

    with pytest.raises(RuleCreationFailed) as exc_info:
        create_tcp_load_balancer(identity, "lb1", "us-central1", 80, ["node-a"], config)

    # No rollback
    assert exc_info.value.pool_link == POOL_LINK
    identity.clients.target_pools.delete.assert_not_called()


def test_create_honours_timeout(identity, config, make_operation, caplog):
    caplog.set_level(logging.WARNING, logger="gcecloud")
    identity.clients.target_pools.insert.return_value = make_operation("op-pool", "PENDING")

    with pytest.raises(PoolCreationFailed) as exc_info:
        create_tcp_load_balancer(
            identity, "lb1", "us-central1", 80, ["node-a"], config, timeout=0
        )

    assert isinstance(exc_info.value.__cause__, OperationTimeout)
    # Accepted insert: the pool may exist, so it is named and logged
    assert exc_info.value.pool_link == POOL_LINK
    assert POOL_LINK in caplog.text
    identity.clients.forwarding_rules.insert.assert_not_called()


def test_create_without_waiting(identity, make_operation):
    identity.clients.target_pools.insert.return_value = make_operation("op-pool", "PENDING")
    identity.clients.forwarding_rules.insert.return_value = make_operation("op-rule", "PENDING")

    create_tcp_load_balancer(
        identity, "lb1", "us-central1", 80, ["node-a"], GCEConfig(wait_for_operations=False)
    )

    identity.clients.region_operations.get.assert_not_called()
    identity.clients.forwarding_rules.insert.assert_called_once()


def test_create_then_exists(identity, config, make_operation):
    # Minimal in-memory forwarding rule store
    store = {}

    def _insert(project, region, forwarding_rule_resource):
        store[(region, forwarding_rule_resource.name)] = forwarding_rule_resource
        return make_operation("op-rule")

    def _get(project, region, forwarding_rule):
        if (region, forwarding_rule) not in store:
            raise exceptions.NotFound(f"{forwarding_rule} not found")
        return store[(region, forwarding_rule)]

    identity.clients.target_pools.insert.return_value = make_operation("op-pool")
    identity.clients.forwarding_rules.insert.side_effect = _insert
    identity.clients.forwarding_rules.get.side_effect = _get

    assert tcp_load_balancer_exists(identity, "lb1", "us-central1") is False
    create_tcp_load_balancer(identity, "lb1", "us-central1", 80, ["node-a"], config)
    assert tcp_load_balancer_exists(identity, "lb1", "us-central1") is True


def test_exists_found(identity):
    identity.clients.forwarding_rules.get.return_value = compute_v1.ForwardingRule(name="lb1")

    assert tcp_load_balancer_exists(identity, "lb1", "us-central1") is True
    identity.clients.forwarding_rules.get.assert_called_once_with(
        project="p", region="us-central1", forwarding_rule="lb1"
    )


def test_exists_not_found(identity):
    identity.clients.forwarding_rules.get.side_effect = exceptions.NotFound("gone")
    assert tcp_load_balancer_exists(identity, "lb1", "us-central1") is False


def test_exists_other_error(identity):
    identity.clients.forwarding_rules.get.side_effect = exceptions.InternalServerError("oops")
    with pytest.raises(ProviderRequestFailed):
        tcp_load_balancer_exists(identity, "lb1", "us-central1")


def test_update_adds_canonical_links(identity, config, make_operation):
    pools = identity.clients.target_pools
    pools.add_instance.return_value = make_operation("op-add")

    update_tcp_load_balancer(
        identity, "lb1", "us-central1", ["node-a.c.p.internal", "node-b"], config
    )

    kwargs = pools.add_instance.call_args.kwargs
    assert kwargs["target_pool"] == "lb1"
    assert kwargs["region"] == "us-central1"
    request = kwargs["target_pools_add_instance_request_resource"]
    assert [ref.instance for ref in request.instances] == [
        HOST_LINK + "node-a",
        HOST_LINK + "node-b",
    ]
    # Additive only
    pools.remove_instance.assert_not_called()


def test_update_failure(identity, config):
    identity.clients.target_pools.add_instance.side_effect = exceptions.NotFound("no pool")
    with pytest.raises(ProviderRequestFailed):
        update_tcp_load_balancer(identity, "lb1", "us-central1", ["node-a"], config)


def test_delete_rule_then_pool(identity, config, make_operation):
    order = []
    identity.clients.forwarding_rules.delete.side_effect = (
        lambda **kw: order.append("rule") or make_operation("op-rule")
    )
    identity.clients.target_pools.delete.side_effect = (
        lambda **kw: order.append("pool") or make_operation("op-pool")
    )

    delete_tcp_load_balancer(identity, "lb1", "us-central1", config)

    assert order == ["rule", "pool"]
    identity.clients.target_pools.delete.assert_called_once_with(
        project="p", region="us-central1", target_pool="lb1"
    )


def test_delete_rule_failure_keeps_pool(identity, config):
    identity.clients.forwarding_rules.delete.side_effect = exceptions.NotFound("gone")

    with pytest.raises(ProviderRequestFailed):
        delete_tcp_load_balancer(identity, "lb1", "us-central1", config)

    identity.clients.target_pools.delete.assert_not_called()


def test_delete_rule_operation_failure_keeps_pool(identity, config, make_operation):
    identity.clients.forwarding_rules.delete.return_value = make_operation(
        "op-rule", errors=[("RESOURCE_IN_USE", "in use")]
    )

    with pytest.raises(OperationFailed):
        delete_tcp_load_balancer(identity, "lb1", "us-central1", config)

    identity.clients.target_pools.delete.assert_not_called()


def test_delete_pool_failure(identity, config, make_operation):
    identity.clients.forwarding_rules.delete.return_value = make_operation("op-rule")
    identity.clients.target_pools.delete.side_effect = exceptions.ServiceUnavailable("busy")

    with pytest.raises(ProviderRequestFailed):
        delete_tcp_load_balancer(identity, "lb1", "us-central1", config)


def test_phase_ready(identity):
    identity.clients.forwarding_rules.get.return_value = compute_v1.ForwardingRule(name="lb1")

    assert get_load_balancer_phase(identity, "lb1", "us-central1") is LoadBalancerPhase.READY
    identity.clients.target_pools.get.assert_not_called()


def test_phase_orphaned_pool(identity):
    identity.clients.forwarding_rules.get.side_effect = exceptions.NotFound("no rule")
    identity.clients.target_pools.get.return_value = compute_v1.TargetPool(name="lb1")

    phase = get_load_balancer_phase(identity, "lb1", "us-central1")
    assert phase is LoadBalancerPhase.POOL_CREATED


def test_phase_absent(identity):
    identity.clients.forwarding_rules.get.side_effect = exceptions.NotFound("no rule")
    identity.clients.target_pools.get.side_effect = exceptions.NotFound("no pool")

    assert get_load_balancer_phase(identity, "lb1", "us-central1") is LoadBalancerPhase.ABSENT


def test_delete_pool_operation_timeout_logs_orphan(identity, config, make_operation, caplog):
    caplog.set_level(logging.WARNING, logger="gcecloud")
    identity.clients.forwarding_rules.delete.return_value = make_operation("op-rule")
    identity.clients.target_pools.delete.return_value = make_operation("op-pool", "PENDING")

    with pytest.raises(OperationTimeout):
        delete_tcp_load_balancer(identity, "lb1", "us-central1", config, timeout=0)

    assert "pool orphaned" in caplog.text
