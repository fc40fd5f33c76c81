from __future__ import annotations

import uk_covid19_client
import uk_covid19_client.data as data


def test_package_exports_clients_config_and_query():
    assert set(uk_covid19_client.__all__) == {
        "Cov19Client",
        "AsyncCov19Client",
        "Cov19ClientConfig",
        "Cov19Query",
    }


def test_data_package_exports_public_models_only():
    expected = {"Cov19Query", "render_query", "JsonResult", "XmlResult", "ApiDescription"}
    assert expected.issubset(set(data.__all__))
    assert "JsonRecordDecoder" not in data.__all__
    assert not hasattr(data, "fetch_pages")
