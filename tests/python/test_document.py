"""End-to-end checks over the bundled sample documents."""

from __future__ import annotations

import httpx
import pytest

from shaderspec.telemetry.metrics import get_registry
from shaderspec.utils.fetch import FetchError, download_text
from shaderspec.wgsl.document import SpecDocument
from shaderspec.wgsl.options import ExtractorOptions
from shaderspec.wgsl.parametrization import ProseBound, TraitBound
from shaderspec.wgsl.primitives import GrammarError
from shaderspec.wgsl.samples import SAMPLE_ROOT, load_sample_documents

SOURCE_URL = "https://example.test/wgsl/index.bs"


@pytest.fixture(scope="module")
def excerpt() -> SpecDocument:
    samples = {sample.name: sample for sample in load_sample_documents()}
    return samples["builtins_excerpt"].document


@pytest.fixture
def excerpt_text() -> str:
    return (SAMPLE_ROOT / "builtins_excerpt.bs").read_text(encoding="utf-8")


def _client(handler) -> httpx.Client:
    return httpx.Client(transport=httpx.MockTransport(handler))


def test_samples_are_discovered() -> None:
    names = [sample.name for sample in load_sample_documents()]
    assert "builtins_excerpt" in names


def test_functions_are_found_in_document_order(excerpt: SpecDocument) -> None:
    assert [decl.name.as_str() for decl in excerpt.fns] == [
        "add_two",
        "abs",
        "clamp",
        "textureSampleLevel",
        "textureDimensions",
        "broken",
        "arrayLength",
    ]
    assert excerpt.function_names()[0] == "add_two"


def test_overload_rows(excerpt: SpecDocument) -> None:
    assert [row.algorithm for row in excerpt.overloads] == [
        "abs",
        "clamp",
        "textureSampleLevel 2d array",
        "textureDimensions storage 2d",
    ]
    abs_row = excerpt.overloads[0]
    source, target = abs_row.parametrization.bounds
    assert len(source.kind) == 6
    assert isinstance(target.kind, ProseBound)
    assert target.kind.text.startswith("is <var ignore>S</var>, or vecN")

    dims_row = excerpt.overloads[3]
    kinds = [bound.kind for bound in dims_row.parametrization]
    assert kinds[:2] == [TraitBound("texel format"), TraitBound("access mode")]


def test_malformed_candidates_are_counted(excerpt: SpecDocument) -> None:
    # The prose "fn keyword" sentence and the row with an invalid parameter name.
    assert excerpt.malformed == 2


def test_instantiated_catalogue(excerpt: SpecDocument) -> None:
    rows = excerpt.instantiated_overloads()
    assert len(rows) == 11
    clamp = [row.fn_decl.signature() for row in rows if row.algorithm == "clamp"]
    assert clamp == [
        f"fn clamp(e: {vec}<{s}>, low: {vec}<{s}>, high: {vec}<{s}>) -> {vec}<{s}>"
        for vec in ("vec2", "vec3", "vec4")
        for s in ("i32", "u32")
    ]
    dims = [
        str(row.fn_decl.args[0][1])
        for row in rows
        if row.fn_decl.name.as_str() == "textureDimensions"
    ]
    assert dims == ["texture_storage_2d<F, A>", "texture_storage_2d_array<F, A>"]


def test_excluded_functions_are_dropped(excerpt: SpecDocument) -> None:
    rows = excerpt.instantiated_overloads(exclude={"clamp"})
    assert len(rows) == 5
    assert all(row.fn_decl.name.as_str() != "clamp" for row in rows)


def test_document_metrics_are_emitted(excerpt_text: str) -> None:
    registry = get_registry()
    registry.reset()
    SpecDocument.from_text(excerpt_text)
    functions = registry.get_series("shaderspec.document.functions")
    overloads = registry.get_series("shaderspec.document.overloads")
    assert functions is not None and functions.last == 7
    assert overloads is not None and overloads.last == 4
    assert registry.get_series("shaderspec.document.parse_ms") is not None
    malformed = registry.get_series("shaderspec.scanner.malformed")
    assert malformed is not None and malformed.total == 2


def test_strict_parse_raises(excerpt_text: str) -> None:
    with pytest.raises(GrammarError) as exc:
        SpecDocument.from_text(excerpt_text, strict=True)
    assert exc.value.committed


def test_from_url_uses_the_given_client(excerpt_text: str) -> None:
    requested: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requested.append(str(request.url))
        return httpx.Response(200, text=excerpt_text)

    with _client(handler) as client:
        document = SpecDocument.from_url(SOURCE_URL, client=client)
    assert requested == [SOURCE_URL]
    assert len(document.overloads) == 4


def test_from_options_passes_url_and_strictness(excerpt_text: str) -> None:
    options = ExtractorOptions(source_url=SOURCE_URL, strict=True)

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text=excerpt_text)

    with _client(handler) as client, pytest.raises(GrammarError):
        SpecDocument.from_options(options, client=client)


def test_http_error_status_raises_fetch_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, text="missing")

    with _client(handler) as client, pytest.raises(FetchError) as exc:
        download_text(SOURCE_URL, client=client)
    assert exc.value.status_code == 404
    assert exc.value.url == SOURCE_URL


def test_timeout_raises_fetch_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("too slow", request=request)

    with _client(handler) as client, pytest.raises(FetchError) as exc:
        download_text(SOURCE_URL, timeout=0.5, client=client)
    assert "timed out after 0.5s" in str(exc.value)
    assert exc.value.status_code is None


def test_download_records_size() -> None:
    registry = get_registry()
    registry.reset()

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b"fn f()")

    with _client(handler) as client:
        assert download_text(SOURCE_URL, client=client) == "fn f()"
    series = registry.get_series("shaderspec.fetch.bytes")
    assert series is not None and series.total == 6
