import base64
import logging

import pytest

from tests.helpers import API, CDN, RecordingWait, json_response
from inliner import InlinerClient
from inliner.config import ClientConfig
from inliner.core.poller import Poller
from inliner.errors import (
    DecodeError,
    InlinerTimeoutError,
    RecommendationError,
    TransportError,
    ValidationError,
)
from inliner.transport.api import InlinerApi
from inliner.transport.base import TransportResponse

READY = {"mediaAsset": {"data": "data:image/png;base64,AAAA"}}


def make_client(config, transport, wait=None):
    poller = Poller(InlinerApi(config, transport), wait=wait or RecordingWait())
    return InlinerClient(config=config, transport=transport, poller=poller)


def calls_to(transport, url):
    return [call for call in transport.calls if call["url"] == url]


def test_generate_uses_recommended_slug_and_polls(config, transport):
    transport.add("POST", f"{API}/url/recommend", json_response({"recommended_slug": "neon-lizard"}))
    transport.add("POST", f"{API}/content/generate", json_response({}))
    transport.add("GET", f"{API}/content/request-json/web/neon-lizard.png", json_response(READY))

    result = make_client(config, transport).generate_image("web", "A neon lizard on a rock")

    assert result.content_path == "web/neon-lizard.png"
    assert result.url == f"{CDN}/web/neon-lizard.png"
    assert result.data == base64.b64decode("AAAA")

    recommend = calls_to(transport, f"{API}/url/recommend")[0]
    assert recommend["json"] == {
        "prompt": "A neon lizard on a rock",
        "project": "web",
        "width": None,
        "height": None,
        "extension": "png",
    }
    assert recommend["headers"]["Authorization"] == "Bearer test-key"
    generate = calls_to(transport, f"{API}/content/generate")[0]
    assert generate["json"]["slug"] == "neon-lizard"


def test_generate_falls_back_to_local_slug(config, transport, caplog):
    transport.add("POST", f"{API}/url/recommend", TransportError("Inliner API error: nope", 500))
    transport.add("POST", f"{API}/content/generate", json_response(READY))

    with caplog.at_level(logging.WARNING, logger="inliner.core.recommend"):
        result = make_client(config, transport).generate_image("web", "Hello, World!", 64, 32)

    assert result.content_path == "web/hello-world.png"
    assert calls_to(transport, f"{API}/content/generate")[0]["json"]["slug"] == "hello-world"
    assert "Slug recommendation failed" in caplog.text


def test_generate_recommendation_failure_can_raise(transport):
    config = ClientConfig(
        api_key="test-key", api_url=API, image_url=CDN, recommendation_failures="raise"
    )
    transport.add("POST", f"{API}/url/recommend", TransportError("Inliner API error: nope", 500))

    with pytest.raises(RecommendationError):
        make_client(config, transport).generate_image("web", "Hello")
    assert calls_to(transport, f"{API}/content/generate") == []


def test_generate_without_smart_url_skips_recommendation(config, transport):
    transport.add("POST", f"{API}/content/generate", json_response(READY))
    make_client(config, transport).generate_image("web", "Neon Lizard", smart_url=False)
    assert transport.urls() == [f"{API}/content/generate"]


def test_generate_inline_payload_skips_polling(config, transport):
    transport.add("POST", f"{API}/content/generate", json_response({"prompt": "/web/echoed.png", **READY}))
    wait = RecordingWait()

    result = make_client(config, transport, wait).generate_image("web", "lizard", smart_url=False)

    assert result.content_path == "web/echoed.png"
    assert result.url == f"{CDN}/web/echoed.png"
    assert len(transport.calls) == 1
    assert wait.calls == []


def test_generate_inline_non_string_payload_raises_decode_error(config, transport):
    transport.add("POST", f"{API}/content/generate", json_response({"mediaAsset": {"data": 123}}))
    with pytest.raises(DecodeError, match="Unsupported payload type"):
        make_client(config, transport).generate_image("web", "lizard", smart_url=False)


def test_generate_polls_echoed_path(config, transport):
    transport.add("POST", f"{API}/content/generate", json_response({"prompt": "/web/server-path.png"}))
    transport.add("GET", f"{CDN}/web/server-path.png", TransportResponse(status=200, body=b"img"))

    result = make_client(config, transport).generate_image("web", "lizard", smart_url=False)

    assert result.data == b"img"
    assert f"{API}/content/request-json/web/server-path.png" in transport.urls()


def test_generate_transport_error_propagates(config, transport):
    transport.add("POST", f"{API}/content/generate", TransportError("Inliner API error: quota", 402))
    with pytest.raises(TransportError, match="quota"):
        make_client(config, transport).generate_image("web", "lizard", smart_url=False)


def test_generate_times_out(config, transport):
    transport.add("POST", f"{API}/content/generate", json_response({}))
    transport.add("GET", f"{API}/content/request-json/web/lizard.png", json_response({}, status=202))

    with pytest.raises(InlinerTimeoutError, match="Generating timed out after 9s"):
        make_client(config, transport).generate_image("web", "lizard", smart_url=False, max_seconds=9)


def test_generate_rejects_invalid_dimensions(config, transport):
    with pytest.raises(ValidationError):
        make_client(config, transport).generate_image("web", "lizard", width=0, height=10)
    assert transport.calls == []


def test_edit_remote_url_chains_path(config, transport):
    path = "web/cat/make-it-blue_100x100.png"
    transport.add("GET", f"{API}/content/request-json/{path}", json_response(READY))

    result = make_client(config, transport).edit_image(
        "https://img.inliner.ai/web/cat.png", "make it blue", width=100, height=100
    )

    assert result.content_path == path
    assert transport.urls() == [f"{API}/content/request-json/{path}"]


def test_edit_local_file_requires_project(config, transport):
    with pytest.raises(ValidationError):
        make_client(config, transport).edit_image(b"\x89PNG", "make it blue")
    assert transport.calls == []


def test_edit_local_file_uploads_then_polls(config, transport, tmp_path):
    source = tmp_path / "cat.png"
    source.write_bytes(b"\x89PNG-source")
    transport.add("POST", f"{API}/content/upload", json_response({"content": {"prompt": "/web/edit-source-1"}}))
    path = "web/edit-source-1/add-a-hat.webp"
    transport.add("GET", f"{CDN}/{path}", TransportResponse(status=200, body=b"edited"))

    client = make_client(config, transport)
    client.jobs.clock = lambda: 1700000000
    result = client.edit_image(source, "Add a hat", project="web", format="webp")

    assert result.data == b"edited"
    assert result.content_path == path
    upload = calls_to(transport, f"{API}/content/upload")[0]
    assert upload["files"]["file"] == ("edit-source-1700000000.png", b"\x89PNG-source")
    assert upload["data"] == {"project": "web", "prompt": "edit-source-1700000000"}


def test_edit_local_file_without_upload_path_fails(config, transport):
    transport.add("POST", f"{API}/content/upload", json_response({"content": {}}))
    with pytest.raises(TransportError):
        make_client(config, transport).edit_image(b"\x89PNG", "blue", project="web")


def test_poll_image_strips_leading_slash(config, transport):
    transport.add("GET", f"{API}/content/request-json/web/cat.png", json_response(READY))
    result = make_client(config, transport).poll_image("/web/cat.png", "Generating", 9)
    assert result.content_path == "web/cat.png"


def test_upload_image_fields_and_tags(config, transport):
    transport.add("POST", f"{API}/content/upload", json_response({"content": {"id": "c1"}}))

    response = make_client(config, transport).upload_image(
        b"bytes",
        "My Photo.JPG",
        "web",
        title="Title",
        description="Desc",
        tags=["cats", "blue"],
        collection_id="col-1",
    )

    assert response == {"content": {"id": "c1"}}
    call = transport.calls[0]
    assert call["files"] == {"file": ("My Photo.JPG", b"bytes")}
    assert call["data"] == {
        "project": "web",
        "prompt": "my-photo",
        "title": "Title",
        "description": "Desc",
        "collectionId": "col-1",
    }
    assert call["params"] == [("tags[]", "cats"), ("tags[]", "blue")]


def test_asset_endpoints(config, transport):
    client = make_client(config, transport)
    routes = [
        ("GET", "content/images"),
        ("GET", "content/search"),
        ("POST", "content/delete"),
        ("POST", "content/rename/c1"),
        ("GET", "content/tags"),
        ("POST", "content/tags"),
        ("POST", "content/tags/remove"),
        ("POST", "content/tags/replace"),
        ("GET", "account/projects"),
        ("POST", "account/projects"),
        ("GET", "account/projects/p1"),
    ]
    for method, path in routes:
        transport.add(method, f"{API}/{path}", json_response({"ok": True}))

    client.list_images({"page": 2})
    client.search("cat", {"limit": 5})
    client.delete_images(["c1", "c2"])
    client.rename_image("c1", "web/new-name.png")
    client.get_all_tags()
    client.add_tags(["c1"], ["a"])
    client.remove_tags(["c1"], ["a"])
    client.replace_tags(["c1"], ["b"])
    client.list_projects()
    client.create_project({"name": "web"})
    client.get_project_details("p1")

    assert [(c["method"], c["url"]) for c in transport.calls] == [
        (method, f"{API}/{path}") for method, path in routes
    ]
    calls = transport.calls
    assert calls[0]["params"] == {"page": 2}
    assert calls[1]["params"] == {"expression": "cat", "limit": 5}
    assert calls[2]["json"] == {"contentIds": ["c1", "c2"]}
    assert calls[3]["json"] == {"newUrl": "web/new-name.png"}
    assert calls[5]["json"] == {"contentIds": ["c1"], "tags": ["a"]}
    assert calls[7]["json"] == {"contentIds": ["c1"], "tags": ["b"]}
    assert calls[9]["json"] == {"name": "web"}


def test_list_endpoint_wraps_json_arrays(config, transport):
    transport.add("GET", f"{API}/account/projects", TransportResponse(status=200, body=b'[{"id": "p1"}]'))
    assert make_client(config, transport).list_projects() == {"items": [{"id": "p1"}]}


def test_build_image_url_and_slugify(config, transport):
    client = make_client(config, transport)
    assert client.build_image_url("web", "A Neon Lizard!", 640, 480) == f"{CDN}/web/a-neon-lizard_640x480.png"
    assert client.build_image_url("web", "cat", 10, 20, "webp") == f"{CDN}/web/cat_10x20.webp"
    assert InlinerClient.slugify("Hello, World!") == "hello-world"
