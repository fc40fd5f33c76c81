from __future__ import annotations

from uk_covid19_client.data.params import (
    build_query_url,
    render_filters,
    render_query,
    render_structure,
)
from uk_covid19_client.data.queries import Cov19Query


def test_render_filters_joins_pairs_with_semicolon(england_filters):
    assert render_filters(england_filters) == "areaType=nation;areaName=England"


def test_render_filters_keeps_caller_order():
    assert render_filters({"b": "2", "a": "1"}) == "b=2;a=1"


def test_render_structure_is_compact_json(cases_structure):
    assert render_structure(cases_structure) == '{"MyDate":"date","newCases":"newCasesByPublishDate"}'


def test_render_query_full_shape(england_filters, cases_structure):
    query = Cov19Query(filters=england_filters, structure=cases_structure, latest_by="newCasesByPublishDate")
    assert render_query(query) == (
        "?filters=areaType=nation;areaName=England"
        '&structure={"MyDate":"date","newCases":"newCasesByPublishDate"}'
        "&latestby=newCasesByPublishDate"
    )


def test_render_query_empty_configuration():
    assert render_query(Cov19Query()) == "?filters=&structure={}&latestby="


def test_render_query_is_deterministic(england_filters, cases_structure):
    first = Cov19Query(filters=england_filters, structure=cases_structure)
    second = Cov19Query(filters=dict(england_filters), structure=dict(cases_structure))
    assert render_query(first) == render_query(second)


def test_render_query_does_not_escape_values():
    query = Cov19Query(filters={"areaName": "Bath and North East Somerset"})
    assert "areaName=Bath and North East Somerset" in render_query(query)


def test_build_query_url_prefixes_endpoint():
    url = build_query_url("https://api.example.test/v1/data", Cov19Query(filters={"areaType": "overview"}))
    assert url == "https://api.example.test/v1/data?filters=areaType=overview&structure={}&latestby="
