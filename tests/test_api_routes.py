"""
Tests for the Artiffex REST API.
Each test gets a fresh graph and an executor backed by the fake service.
Run: pytest tests/test_api_routes.py -v
"""
import base64

import pytest
from fastapi.testclient import TestClient

from artiffex.api import server
from artiffex.executor.executor import NodeExecutor
from artiffex.workflow.graph_store import GraphStore
from artiffex.workflow.models import NodeKind


@pytest.fixture
def store():
    return GraphStore(strict_parents=False)


@pytest.fixture
def client(monkeypatch, store, fake_service):
    monkeypatch.setattr(server, "graph_store", store)
    monkeypatch.setattr(server, "executor", NodeExecutor(store, fake_service))
    return TestClient(server.app)


def _add(client, kind, parent_id=None, **fields):
    r = client.post("/nodes", json={"kind": kind, "parent_id": parent_id, **fields})
    assert r.status_code == 200, r.text
    return r.json()


# ══════════════════════════════════════════════════════════════════
# SYSTEM
# ══════════════════════════════════════════════════════════════════


class TestSystem:

    def test_health(self, client):
        r = client.get("/health")
        assert r.status_code == 200
        data = r.json()
        assert data["status"] == "ok"
        assert data["nodes"] == 0

    def test_kinds(self, client):
        data = client.get("/kinds").json()
        assert data["count"] == len(NodeKind)
        assert {"category", "kind", "title", "is_source"} <= set(data["kinds"][0])


# ══════════════════════════════════════════════════════════════════
# GRAPH
# ══════════════════════════════════════════════════════════════════


class TestGraphRoutes:

    def test_add_and_get(self, client):
        node = _add(client, "source-generate", prompt="a red fox")
        assert node["status"] == "idle"
        r = client.get(f"/nodes/{node['id']}")
        assert r.status_code == 200
        assert r.json()["prompt"] == "a red fox"

    def test_add_unknown_kind(self, client):
        r = client.post("/nodes", json={"kind": "op-teleport"})
        assert r.status_code == 422

    def test_get_missing(self, client):
        assert client.get("/nodes/node-missing").status_code == 404

    def test_list_filtered_by_kind(self, client):
        root = _add(client, "source-generate")
        _add(client, "op-lego", root["id"])
        data = client.get("/nodes", params={"kind": "op-lego"}).json()
        assert data["count"] == 1
        assert data["nodes"][0]["kind"] == "op-lego"

    def test_patch(self, client):
        node = _add(client, "op-style")
        r = client.patch(f"/nodes/{node['id']}", json={"custom_text": "ukiyo-e"})
        assert r.status_code == 200
        assert r.json()["custom_text"] == "ukiyo-e"

    def test_patch_rejects_immutable(self, client):
        node = _add(client, "op-style")
        r = client.patch(f"/nodes/{node['id']}", json={"kind": "op-lego"})
        assert r.status_code == 400

    def test_patch_rejects_execution_fields(self, client):
        node = _add(client, "op-style")
        for body in ({"status": "ready"}, {"generation_id": "gen-1"}, {"error": {"message": "x"}}):
            r = client.patch(f"/nodes/{node['id']}", json=body)
            assert r.status_code == 400
            assert "set by node execution only" in r.json()["detail"]
        assert client.get(f"/nodes/{node['id']}").json()["status"] == "idle"

    def test_tree_queries_and_delete(self, client):
        root = _add(client, "source-generate")
        a = _add(client, "op-watercolor", root["id"])
        b = _add(client, "op-glitch", a["id"])

        desc = client.get(f"/nodes/{root['id']}/descendants").json()["descendants"]
        assert set(desc) == {a["id"], b["id"]}
        anc = client.get(f"/nodes/{b['id']}/ancestors").json()["ancestors"]
        assert anc == [a["id"], root["id"]]
        assert client.get("/edges").json()["count"] == 2

        r = client.delete(f"/nodes/{a['id']}")
        assert set(r.json()["removed"]) == {a["id"], b["id"]}
        assert client.get("/edges").json()["count"] == 0
        assert client.post("/graph/validate").json() == {"valid": True, "errors": []}

    def test_invalidate(self, client):
        root = _add(client, "source-generate")
        a = _add(client, "op-watercolor", root["id"])
        r = client.post(f"/nodes/{root['id']}/invalidate")
        assert r.json()["removed"] == [a["id"]]
        assert client.get(f"/nodes/{root['id']}").status_code == 200

    def test_stats_and_export(self, client):
        root = _add(client, "source-generate")
        _add(client, "op-lego", root["id"])
        stats = client.get("/graph/stats").json()
        assert stats["total_nodes"] == 2
        assert stats["total_edges"] == 1
        export = client.get("/graph/export").json()
        assert len(export["nodes"]) == 2


# ══════════════════════════════════════════════════════════════════
# EXECUTION
# ══════════════════════════════════════════════════════════════════


class TestExecutionRoutes:

    def test_run_generate(self, client, fake_service):
        node = _add(client, "source-generate", prompt="a red fox")
        r = client.post(f"/nodes/{node['id']}/run", json={"aspect_ratio": "4:3"})
        assert r.status_code == 200
        data = r.json()
        assert data["status"] == "ready"
        assert data["output_ref"].startswith("data:image/png;base64,")
        assert fake_service.image_calls == [("a red fox", "4:3")]

    def test_run_empty_prompt_marks_failed(self, client):
        node = _add(client, "source-generate")
        data = client.post(f"/nodes/{node['id']}/run", json={}).json()
        assert data["status"] == "failed"
        assert data["error"]["kind"] == "empty_prompt"

    def test_run_missing(self, client):
        assert client.post("/nodes/node-missing/run", json={}).status_code == 404

    def test_run_chain(self, client, fake_service):
        root = _add(client, "source-generate", prompt="a red fox")
        client.post(f"/nodes/{root['id']}/run", json={})
        child = _add(client, "op-bw", root["id"])
        assert child["base_prompt"] == "a red fox"
        data = client.post(f"/nodes/{child['id']}/run", json={}).json()
        assert data["base_prompt"] == "a red fox, as a high-contrast black and white photograph"

    def test_upload(self, client, fake_service):
        node = _add(client, "source-upload")
        payload = {"image_base64": base64.b64encode(b"jpeg bytes").decode(), "mime_type": "image/jpeg"}
        r = client.post(f"/nodes/{node['id']}/upload", json=payload)
        assert r.status_code == 200
        assert r.json()["base_prompt"] == fake_service.description

    def test_upload_bad_base64(self, client):
        node = _add(client, "source-upload")
        r = client.post(f"/nodes/{node['id']}/upload", json={"image_base64": "%%%"})
        assert r.status_code == 400

    def test_upload_wrong_kind(self, client):
        node = _add(client, "source-generate")
        payload = {"image_base64": base64.b64encode(b"x").decode()}
        assert client.post(f"/nodes/{node['id']}/upload", json=payload).status_code == 400

    def test_enhance(self, client, fake_service):
        node = _add(client, "op-prompt-magic", base_prompt="a red fox")
        r = client.post(f"/nodes/{node['id']}/enhance")
        assert r.status_code == 200
        assert r.json()["enhanced_prompt"] == fake_service.text_reply

    def test_enhance_without_base(self, client):
        node = _add(client, "op-prompt-magic")
        r = client.post(f"/nodes/{node['id']}/enhance")
        assert r.status_code == 400
        assert r.json()["detail"]["kind"] == "empty_prompt"

    def test_enhance_service_failure(self, client, fake_service):
        node = _add(client, "op-prompt-magic", base_prompt="a red fox")
        fake_service.fail_with = RuntimeError("RESOURCE_EXHAUSTED")
        r = client.post(f"/nodes/{node['id']}/enhance")
        assert r.status_code == 502
        assert r.json()["detail"]["kind"] == "quota_exceeded"


# ══════════════════════════════════════════════════════════════════
# IMAGESCRIPT & ANIMATION
# ══════════════════════════════════════════════════════════════════


class TestScriptRoutes:

    def test_compile(self, client):
        script = 'create robot "android" { material: "chrome"; }'
        data = client.post("/imagescript/compile", json={"script": script}).json()
        assert data["prompt"] == "A android, chrome"
        assert data["parsed"]["subject"]["name"] == "android"

    def test_lint(self, client):
        script = 'create robot "android" {\n  material: "chrome"\n}'
        data = client.post("/imagescript/lint", json={"script": script}).json()
        assert data["count"] == 1
        assert data["errors"][0]["line"] == 2

    def test_animation_prompts(self, client, fake_service):
        r = client.post("/animation/prompts", json={
            "base_prompt": "a red fox", "instruction": "the fox jumps", "frame_count": 3,
        })
        assert r.status_code == 200
        assert r.json()["prompts"] == fake_service.frames

    def test_animation_rejects_zero_frames(self, client):
        r = client.post("/animation/prompts", json={
            "base_prompt": "a red fox", "instruction": "jump", "frame_count": 0,
        })
        assert r.status_code == 422
