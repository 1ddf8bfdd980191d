"""
End-to-end tests: multi-file model through every stage.
"""

import pytest

from mfdcore import analyze_file, analyze_source
from mfdcore.model import ConstructKind, key
from mfdcore.relationships import ConstructRef
from mfdcore.resolver import ResolveErrorType
from mfd_nodes import api, component, endpoint, entity, field, flow, include, ref, step, system

pytestmark = pytest.mark.integration


@pytest.fixture
def shop_project(write_mfd):
    write_mfd("shared/types.mfd", [entity("Money")])
    write_mfd(
        "auth.mfd",
        [component("Auth", entity("User"), api(endpoint("GET", "/me", return_type=ref("User")), prefix="/auth"))],
    )
    write_mfd(
        "orders.mfd",
        [
            component(
                "Orders",
                entity("Order", field("owner", ref("User")), field("total", ref("Money"))),
                api(endpoint("POST", "/", return_type=ref("Money")), prefix="/orders"),
                flow("checkout", step("charge", "Order")),
            )
        ],
    )
    return write_mfd("main.mfd", [system("Shop", include("shared/types"), include("auth"), include("orders"))])


class TestAnalyzeFile:
    def test_full_run(self, shop_project, json_parser):
        result = analyze_file(shop_project, json_parser)

        assert result.ok
        assert len(result.resolution.files) == 4
        assert [c.name for c in result.model.components] == ["Auth", "Orders"]
        # Hoisted shared entity is claimed through API usage
        assert result.owners[key(ConstructKind.ENTITY, "Money")] == "Orders"
        order = result.graph[key(ConstructKind.ENTITY, "Order")]
        assert ConstructRef(component="Auth", kind=ConstructKind.ENTITY, name="User") in order.references_types
        assert result.graph.find_asymmetries() == []

    def test_diagnostics_do_not_stop_analysis(self, write_mfd, json_parser):
        root = write_mfd("main.mfd", [include("missing"), component("Solo", entity("Thing"))])

        result = analyze_file(root, json_parser)

        assert not result.ok
        assert result.resolution.errors[0].type is ResolveErrorType.FILE_NOT_FOUND
        assert result.owners[key(ConstructKind.ENTITY, "Thing")] == "Solo"
        assert key(ConstructKind.ENTITY, "Thing") in result.graph

    def test_model_without_components(self, write_mfd, json_parser):
        root = write_mfd("main.mfd", [entity("User")])

        result = analyze_file(root, json_parser)

        assert not result.owners.has_components
        assert len(result.graph) == 0

    def test_analyze_source(self, temp_dir, write_mfd, json_parser):
        import json

        from mfd_nodes import document

        write_mfd("auth.mfd", [component("Auth", entity("User"))])

        result = analyze_source(json.dumps(document(include("auth"))), temp_dir / "main.mfd", json_parser)

        assert result.owners[key(ConstructKind.ENTITY, "User")] == "Auth"
